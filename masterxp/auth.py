# masterxp/auth.py
"""
Bearer-token authentication.

Provides:
- decode_token(token) -> claims dict   (raises AuthError)
- requires_auth(view)                  decorator, sets g.subject_id

Tokens are RS256 JWTs from the identity provider, checked against its JWKS,
issuer and audience. When AUTH_SECRET is configured (local dev, tests) HS256
tokens signed with that secret are accepted instead.
"""

from functools import wraps

import jwt
from flask import current_app, g, request

from .errors import AuthError

_jwks_clients = {}


def _issuer():
    domain = (current_app.config.get("AUTH0_DOMAIN") or "").strip()
    return f"https://{domain}/" if domain else None


def _jwks_client():
    issuer = _issuer()
    if not issuer:
        raise AuthError("authentication is not configured")
    url = f"{issuer}.well-known/jwks.json"
    client = _jwks_clients.get(url)
    if client is None:
        client = jwt.PyJWKClient(url)
        _jwks_clients[url] = client
    return client


def _bearer_token():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("missing bearer token")
    return token.strip()


def decode_token(token):
    """Validate a token and return its claims. Any failure raises AuthError."""
    cfg = current_app.config
    audience = cfg.get("AUTH0_AUDIENCE") or None
    issuer = _issuer()
    options = {"require": ["exp", "sub"], "verify_aud": audience is not None}

    try:
        secret = cfg.get("AUTH_SECRET")
        if secret:
            key, algorithms = secret, ["HS256"]
        else:
            key = _jwks_client().get_signing_key_from_jwt(token).key
            algorithms = ["RS256"]
        claims = jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience=audience,
            issuer=issuer,
            leeway=cfg.get("AUTH_LEEWAY", 5),
            options=options,
        )
    except jwt.PyJWTError as e:
        current_app.logger.warning("rejected token: %s", e)
        raise AuthError("invalid token") from e

    if not isinstance(claims.get("sub"), str) or not claims["sub"].strip():
        raise AuthError("token has no subject")
    return claims


def requires_auth(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        claims = decode_token(_bearer_token())
        g.subject_id = claims["sub"]
        g.claims = claims
        return view(*args, **kwargs)

    return wrapper
