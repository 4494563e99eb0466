# backend/birdsurvey/api/auth.py
"""Bearer-token authentication.

Tokens are issued by the identity provider; this service only verifies them
and exposes the caller as ``CurrentUser``. ``build_access_token`` mints
compatible tokens for local development and tests.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

import jwt
from fastapi import Depends, Header, HTTPException, status

from birdsurvey.config import Settings, get_settings


class AuthError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class CurrentUser:
    user_id: int
    email: str = ""


def build_access_token(*, user_id: int, email: str = "", settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    issued_at = int(time.time())
    payload = {
        "sub": str(user_id),
        "email": email,
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + settings.access_token_expire_minutes * 60,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> dict[str, Any]:
    settings = settings or get_settings()
    raw = (token or "").strip()
    if not raw:
        raise AuthError("Access token is empty.")

    try:
        payload = jwt.decode(raw, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid access token.") from exc

    if str(payload.get("type") or "").strip().lower() != "access":
        raise AuthError("Token is not an access token.")
    return payload


def _extract_bearer_token(authorization: Optional[str]) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header.",
        )

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
        )
    return token


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    token = _extract_bearer_token(authorization)
    try:
        payload = decode_access_token(token, settings)
        user_id = int(payload["sub"])
    except (AuthError, KeyError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc) or "Invalid token.") from exc
    return CurrentUser(user_id=user_id, email=str(payload.get("email") or ""))
