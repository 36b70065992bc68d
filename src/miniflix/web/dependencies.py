"""
FastAPI dependencies that hand application-scoped collaborators to handlers.

Everything lives on ``app.state`` (set up by ``create_app``), so each app
instance, including the ones tests build, is fully isolated.
"""

from __future__ import annotations

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from miniflix.catalog.resolver import CatalogSource
from miniflix.infra.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> sessionmaker:
    return request.app.state.session_factory


def get_catalog(request: Request) -> CatalogSource:
    return request.app.state.catalog
