from __future__ import annotations

import logging

import jwt
from fastapi import HTTPException, Request

from shipadmin.core.config import settings
from shipadmin.schemas.request_identity import RequestIdentity

logger = logging.getLogger(__name__)


def _normalized_auth_mode() -> str:
    raw = (settings.AUTH_MODE or "legacy_header").strip().lower()
    if raw in {"legacy_header", "dual", "jwt_only"}:
        return raw
    return "legacy_header"


def _algorithms() -> list[str]:
    algorithms = [
        token.strip().upper()
        for token in (settings.AUTH_JWT_ALGORITHMS or "HS256").split(",")
        if token.strip()
    ]
    return algorithms or ["HS256"]


def _extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization") or ""
    prefix = "Bearer "
    if not header.startswith(prefix):
        return None
    token = header[len(prefix) :].strip()
    return token or None


def _identity_from_legacy_header(request: Request) -> RequestIdentity:
    email = (
        request.headers.get("X-User-Email")
        or request.headers.get("X-User")
        or "system@local"
    )
    return RequestIdentity(
        subject=None,
        email=(email or "").strip().lower() or None,
        auth_source="legacy_header",
        is_admin=True,
        claims={},
    )


def _extract_email_from_claims(claims: dict) -> str | None:
    for key in ("email", "upn", "preferred_username", "username"):
        value = claims.get(key)
        if value is None:
            continue
        text = str(value).strip().lower()
        if text:
            return text
    return None


def decode_admin_token(token: str) -> dict:
    if not settings.AUTH_JWT_SECRET:
        logger.error("jwt_secret_missing auth_mode=%s", settings.AUTH_MODE)
        raise HTTPException(status_code=401, detail="Token verification is not configured.")
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=_algorithms(),
            leeway=settings.AUTH_JWT_CLOCK_SKEW_SEC,
        )
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=401, detail="Token expired, please login again") from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("jwt_rejected error=%s", exc)
        raise HTTPException(status_code=401, detail="Invalid Token, please login again") from exc


def _identity_from_token(token: str) -> RequestIdentity:
    claims = decode_admin_token(token)

    # Storefront tokens carry the user document id as `_id`.
    subject = claims.get("sub") or claims.get("_id")
    subject_text = str(subject).strip() if subject is not None else ""
    if not subject_text:
        raise HTTPException(status_code=401, detail="Invalid Token, please login again")

    is_admin = bool(claims.get("isAdmin") or claims.get("is_admin"))
    if settings.AUTH_REQUIRE_ADMIN and not is_admin:
        logger.warning("admin_access_denied subject=%s", subject_text)
        raise HTTPException(status_code=403, detail="Admin access required")

    email = _extract_email_from_claims(claims)
    if not email:
        logger.warning(
            "jwt_identity_email_missing subject=%s claim_keys=%s",
            subject_text,
            sorted(str(k) for k in claims.keys()),
        )
    return RequestIdentity(
        subject=subject_text,
        email=email,
        auth_source="jwt",
        is_admin=is_admin,
        claims=claims,
    )


def resolve_request_identity(request: Request) -> RequestIdentity:
    token = _extract_bearer_token(request)
    mode = _normalized_auth_mode()
    if mode == "legacy_header":
        return _identity_from_legacy_header(request)

    if mode == "jwt_only":
        if not token:
            raise HTTPException(status_code=401, detail="Token missing, please login again")
        return _identity_from_token(token)

    # dual mode: prefer JWT when present, otherwise fallback to legacy header.
    if token:
        return _identity_from_token(token)
    return _identity_from_legacy_header(request)


def get_request_identity(request: Request) -> RequestIdentity:
    return resolve_request_identity(request)


def get_request_email(request: Request) -> str:
    identity = resolve_request_identity(request)
    return identity.email or "system@local"
