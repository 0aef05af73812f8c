"""Expose the application factory at package level.

``from stateless_oauth import create_app`` builds a Flask app with the token
service wired into ``app.extensions["token_service"]``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
