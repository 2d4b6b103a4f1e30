"""Authentication.

Learn: Users → username/password → one signed JWT access token. Every
protected request presents that token as `Authorization: Bearer <token>`;
the dependencies module resolves it to a User row, which services use as
the caller identity for ownership checks.
"""
