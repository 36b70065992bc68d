"""
Account API: registration, login, logout and the current identity.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from miniflix.auth.identity import SessionIdentityProvider, get_identity_provider, require_identity
from miniflix.domain.types import Identity
from miniflix.infra.logging import get_logger
from miniflix.infra.settings import Settings
from miniflix.infra.uow import session
from miniflix.usecases.user_login import authenticate_user
from miniflix.usecases.user_register import register_user
from miniflix.web.dependencies import get_session_factory, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


class Credentials(BaseModel):
    # Optional so that a missing field reports {"error": "missing"} like an empty one
    username: str | None = None
    password: str | None = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: Credentials,
    factory: sessionmaker = Depends(get_session_factory),
    cfg: Settings = Depends(get_settings),
) -> dict[str, Any]:
    with session(factory) as db:
        user = register_user(
            db,
            username=body.username or "",
            password=body.password or "",
            rounds=cfg.bcrypt_rounds,
        )
    logger.info("user_registered", user_id=user["id"], username=user["username"])
    return {"ok": True}


@router.post("/login")
def login(
    request: Request,
    body: Credentials,
    factory: sessionmaker = Depends(get_session_factory),
    provider: SessionIdentityProvider = Depends(get_identity_provider),
) -> dict[str, Any]:
    with session(factory) as db:
        identity = authenticate_user(db, username=body.username or "", password=body.password or "")
    provider.login(request, identity)
    logger.info("user_logged_in", user_id=identity.user_id)
    return {"ok": True}


@router.get("/logout")
def logout(
    request: Request, provider: SessionIdentityProvider = Depends(get_identity_provider)
) -> dict[str, Any]:
    provider.logout(request)
    return {"ok": True}


@router.get("/me")
def me(identity: Identity = Depends(require_identity)) -> dict[str, Any]:
    return {"user": {"id": identity.user_id, "username": identity.username}}
