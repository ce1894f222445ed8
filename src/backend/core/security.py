"""Password hashing and bearer token verification."""

import bcrypt
from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger
from pydantic import BaseModel, Field

from src.backend.runtime.context import get_config


class TokenClaims(BaseModel):
    """The subset of bearer token claims the API relies on."""

    subject: str | None = Field(default=None, description="Token subject (sub)")
    role_id: int | str | None = Field(
        default=None, description="Identifier of the caller's role"
    )


def hash_password(plaintext: str) -> str:
    """Return a salted bcrypt hash of ``plaintext``."""
    rounds = get_config().security.bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")


def verify_password(plaintext: str, hashed: str | None) -> bool:
    """Check ``plaintext`` against a stored bcrypt hash.

    Anything that is not a well-formed bcrypt hash never matches.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def _role_id_from_claim(value) -> int | str | None:
    if isinstance(value, dict):
        return value.get("id")
    return value


def decode_access_token(token: str) -> TokenClaims:
    """Verify a bearer token and extract its claims.

    Raises:
        HTTPException: 401 when the token is malformed, expired, signed with a
            disallowed algorithm or carries the wrong audience; 500 when no
            verification secret is configured.
    """
    cfg = get_config().jwt
    if not cfg.secret:
        raise HTTPException(status_code=500, detail="JWT secret not configured")

    claims_options = None
    if cfg.audiences:
        claims_options = {"aud": {"essential": True, "values": cfg.audiences}}

    try:
        claims = JsonWebToken(cfg.allowed_algorithms).decode(
            token, cfg.secret, claims_options=claims_options
        )
        claims.validate(leeway=cfg.clock_skew)
    except (JoseError, ValueError) as exc:
        logger.debug("Rejected bearer token: {}", exc)
        raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

    return TokenClaims(
        subject=claims.get("sub"),
        role_id=_role_id_from_claim(claims.get(cfg.role_claim)),
    )
