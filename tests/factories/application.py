"""Factory Boy definition for :class:`stateless_oauth.models.application.Application`."""

from __future__ import annotations

import factory

from stateless_oauth.models.application import Application
from tests.factories import BaseFactory


class ApplicationFactory(BaseFactory):
    """Build persisted OAuth clients; the raw secret defaults to ``s3cret``."""

    class Meta:
        model = Application

    id = None
    name = factory.Sequence(lambda n: f"client {n}")
    uid = factory.Sequence(lambda n: f"client-uid-{n}")
    scopes = ""
    secret_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def secret(obj, create, extracted, **kwargs):
        """Set the secret through the model setter (ensures hashing)."""
        obj.secret = extracted or "s3cret"
