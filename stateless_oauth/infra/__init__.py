"""Adapters implementing the token engine's ports (Redis, SQLAlchemy, Flask-JWT-Extended)."""
