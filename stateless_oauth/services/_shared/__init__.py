"""Shared service primitives: base class, domain errors and ports."""
