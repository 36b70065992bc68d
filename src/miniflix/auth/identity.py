"""
Request identity.

The identity of a request comes from the signed session cookie managed by
Starlette's ``SessionMiddleware``. Handlers never read the session directly:
they take an ``Identity`` from ``require_identity`` and pass it explicitly to
every operation that needs it.
"""

from __future__ import annotations

from typing import Any, Protocol

from fastapi import Request

from miniflix.domain.types import Identity
from miniflix.infra.exceptions import Unauthenticated

SESSION_KEY = "user"


class IdentityProvider(Protocol):
    def verify(self, request: Request) -> Identity | None: ...


class SessionIdentityProvider:
    """Reads and writes the identity stored in the session cookie."""

    def verify(self, request: Request) -> Identity | None:
        data: Any = request.session.get(SESSION_KEY)
        if not isinstance(data, dict):
            return None
        user_id = data.get("id")
        username = data.get("username")
        if not isinstance(user_id, int) or not isinstance(username, str):
            return None
        return Identity(user_id=user_id, username=username)

    def login(self, request: Request, identity: Identity) -> None:
        request.session.clear()
        request.session[SESSION_KEY] = {"id": identity.user_id, "username": identity.username}

    def logout(self, request: Request) -> None:
        request.session.clear()


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def require_identity(request: Request) -> Identity:
    """FastAPI dependency: the caller's identity, or 401."""
    identity = get_identity_provider(request).verify(request)
    if identity is None:
        raise Unauthenticated()
    return identity
