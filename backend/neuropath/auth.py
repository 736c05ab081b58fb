from fastapi import HTTPException, Request
from jose import JWTError, jwt
import logging

from core import config

logger = logging.getLogger("neuropath.auth")


def _resolve_payload_from_token(token: str) -> dict:
    if config.NEUROPATH_JWT_SECRET:
        try:
            return jwt.decode(token, config.NEUROPATH_JWT_SECRET, algorithms=["HS256"])
        except JWTError:
            raise HTTPException(401, "Invalid token")

    if config.ENVIRONMENT == "production":
        raise HTTPException(500, "NEUROPATH_JWT_SECRET is not configured")
    if not config.ALLOW_UNVERIFIED_JWT_DEV:
        raise HTTPException(
            401,
            "Token verification unavailable in development; configure NEUROPATH_JWT_SECRET or set ALLOW_UNVERIFIED_JWT_DEV=true",
        )
    try:
        payload = jwt.get_unverified_claims(token)
    except JWTError:
        raise HTTPException(401, "Invalid token")
    logger.warning("ALLOW_UNVERIFIED_JWT_DEV enabled; using unverified token claims in non-production mode")
    return payload


def get_owner_id(request: Request) -> str:
    auth = request.headers.get("Authorization")
    if not auth:
        raise HTTPException(401, "Unauthorized")

    if not auth.startswith("Bearer "):
        raise HTTPException(401, "Unauthorized")

    token = auth.replace("Bearer ", "", 1)
    payload = _resolve_payload_from_token(token)

    owner_id = (payload or {}).get("sub")
    if not owner_id:
        raise HTTPException(401, "Invalid token")

    return str(owner_id)
