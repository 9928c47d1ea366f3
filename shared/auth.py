from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("quiz-service.auth")

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_ADMIN = "admin"
ROLES = (ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN)

# Public paths that don't require auth
PUBLIC_PATHS = {
    "/health",
    "/docs",
    "/openapi.json",
}


def _is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS


async def _verify_token(auth_service_url: str, token: str) -> dict[str, Any]:
    """
    Verify token via auth-service and normalize returned payload.
    REQUIRED: sub, role
    """
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            r = await client.post(f"{auth_service_url}/auth/verify", json={"token": token})
    except httpx.RequestError as e:
        logger.error("Auth service error: %s", e)
        raise HTTPException(status_code=503, detail="Authentication service unavailable")

    if r.status_code != 200:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        payload: Any = r.json()
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    if isinstance(payload, dict) and isinstance(payload.get("user"), dict):
        payload = payload["user"]
    if not isinstance(payload, dict):
        raise HTTPException(status_code=401, detail="Invalid token payload")

    sub = payload.get("sub")
    role = str(payload.get("role") or "").strip().lower()
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub")
    if role not in ROLES:
        raise HTTPException(status_code=401, detail="Token missing role")

    return {"sub": str(sub), "email": str(payload.get("email") or ""), "role": role}


def build_auth_middleware(auth_service_url: str):
    async def auth_middleware(request: Request, call_next):
        # Let CORS preflight pass through
        if request.method == "OPTIONS" or _is_public_path(request.url.path):
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.lower().startswith("bearer "):
            return JSONResponse(status_code=401, content={"detail": "Missing Bearer token"})

        token = auth_header.split(" ", 1)[1].strip()
        if not token:
            return JSONResponse(status_code=401, content={"detail": "Missing token"})

        try:
            request.state.user = await _verify_token(auth_service_url, token)
        except HTTPException as e:
            return JSONResponse(status_code=e.status_code, content={"detail": e.detail})

        return await call_next(request)

    return auth_middleware


def current_user(request: Request) -> dict[str, Any]:
    user = getattr(request.state, "user", None)
    if not user or "sub" not in user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def current_user_id(user: dict = Depends(current_user)) -> int:
    try:
        return int(user["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user id")


def require_roles(*roles: str):
    allowed = set(roles)

    def checker(user: dict = Depends(current_user)) -> dict[str, Any]:
        if user.get("role") not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden for this role")
        return user

    return checker
