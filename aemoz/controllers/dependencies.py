"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from aemoz.database import Database
from aemoz.services import (
    AccessGate,
    AdminIdentity,
    GroupingEngine,
    GroupStore,
    ParticipantRegistry,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


DatabaseDep = Annotated[Database, Depends(get_database)]
AccessGateDep = Annotated[AccessGate, Depends(get_access_gate)]


def get_registry(db: DatabaseDep) -> ParticipantRegistry:
    return ParticipantRegistry(db)


def get_grouping_engine(db: DatabaseDep) -> GroupingEngine:
    return GroupingEngine(db)


def get_group_store(db: DatabaseDep) -> GroupStore:
    return GroupStore(db)


async def get_current_admin(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    gate: AccessGateDep,
) -> AdminIdentity:
    """Resolve the admin identity from the bearer token or fail with 401/403."""

    return gate.verify(token)


RegistryDep = Annotated[ParticipantRegistry, Depends(get_registry)]
GroupingEngineDep = Annotated[GroupingEngine, Depends(get_grouping_engine)]
GroupStoreDep = Annotated[GroupStore, Depends(get_group_store)]
CurrentAdminDep = Annotated[AdminIdentity, Depends(get_current_admin)]


__all__ = [
    "oauth2_scheme",
    "get_database",
    "get_access_gate",
    "get_registry",
    "get_grouping_engine",
    "get_group_store",
    "get_current_admin",
    "DatabaseDep",
    "AccessGateDep",
    "RegistryDep",
    "GroupingEngineDep",
    "GroupStoreDep",
    "CurrentAdminDep",
]
