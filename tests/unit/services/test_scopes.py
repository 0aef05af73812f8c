# tests/unit/services/test_scopes.py
from __future__ import annotations

import pytest

from stateless_oauth.services.tokens.scopes import Scopes, ScopeChecker, scopes_match


def test_from_string_removes_duplicates_and_keeps_order():
    scopes = Scopes.from_string("read  write read admin ")
    assert scopes.all() == ["read", "write", "admin"]
    assert str(scopes) == "read write admin"


@pytest.mark.parametrize("raw", ["", "read", "write read", "a b c a"])
def test_parsing_the_serialization_is_idempotent(raw):
    once = Scopes.from_string(raw)
    assert Scopes.from_string(str(once)) == once
    assert str(Scopes.from_string(str(once))) == str(once)


@pytest.mark.parametrize("raw", ["read\twrite", "read\xa0write", "read\x0bwrite"])
def test_only_plain_spaces_delimit_scopes(raw):
    assert Scopes.from_string(raw).all() == [raw]
    assert not Scopes.from_string(raw).exists("read")


def test_none_parses_to_empty_set():
    assert not Scopes.from_string(None)
    assert len(Scopes.coerce(None)) == 0


def test_equality_ignores_order():
    assert Scopes.from_string("read write") == Scopes.from_string("write read")
    assert hash(Scopes.from_string("read write")) == hash(Scopes.from_string("write read"))


def test_membership_is_exact_string_match():
    scopes = Scopes.from_string("read")
    assert scopes.exists("read")
    assert not scopes.exists("Read")
    assert not scopes.exists("rea")


def test_includes_is_logical_or():
    scopes = Scopes.from_string("read write")
    assert scopes.includes("admin", "write")
    assert not scopes.includes("admin", "delete")


def test_includes_nothing_is_true_even_for_empty_set():
    assert Scopes().includes()


def test_set_operators():
    left = Scopes.from_string("read write")
    right = Scopes.from_string("write admin")
    assert (left & right).all() == ["write"]
    assert (left + right).all() == ["read", "write", "admin"]


# ---------------------------- matching law -------------------------------- #


@pytest.mark.parametrize(
    ("token", "requested", "app", "expected"),
    [
        ("", "", "", True),
        ("read write", "", "", True),
        ("", "", "read", True),
        ("read write", "read", "", True),
        ("read write", "read write", "", True),
        ("read", "read write", "", False),
        ("", "read", "", False),
        ("read write", "read", "read admin", True),
        ("read write", "write", "read admin", False),
        ("read write", "admin", "read admin", False),
    ],
)
def test_scopes_match_subset_law(token, requested, app, expected):
    assert scopes_match(token, requested, app) is expected


def test_scopes_match_accepts_scope_objects_and_lists():
    assert scopes_match(Scopes.from_string("a b"), ["a"], Scopes())
    assert not scopes_match(["a"], Scopes.from_string("b"))


@pytest.mark.parametrize("bad", ["", "   ", "read\nwrite", "read\twrite", "read\rwrite", "read\xa0write", "read\x0bwrite"])
def test_scope_checker_rejects_blank_or_control_characters(bad):
    assert ScopeChecker.valid(bad, "read write") is False


def test_scope_checker_requires_subset_of_server_scopes():
    assert ScopeChecker.valid("read", "read write")
    assert not ScopeChecker.valid("read admin", "read write")
