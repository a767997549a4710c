"""
FastAPI dependencies: configuration singletons and the current session.

The catalogues, the role table and the session store are built once at
import; routes receive them through ``Depends`` so tests can override them
with ``app.dependency_overrides``.
"""
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from index_studio.catalog.bands import BAND_REGISTRY, BandRegistry
from index_studio.catalog.indices import INDEX_CATALOGUE, IndexCatalog
from index_studio.catalog.ramps import COLOR_RAMPS, RampCatalog
from index_studio.core.access import ROLE_TABLE, AccessControl, Permission
from index_studio.sessions import Session, SessionStore, session_store

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)
_access_control = AccessControl(ROLE_TABLE)


def get_bands() -> BandRegistry:
    return BAND_REGISTRY


def get_ramps() -> RampCatalog:
    return COLOR_RAMPS


def get_index_catalogue() -> IndexCatalog:
    return INDEX_CATALOGUE


def get_access_control() -> AccessControl:
    return _access_control


def get_session_store() -> SessionStore:
    return session_store


def get_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    store: SessionStore = Depends(get_session_store),
) -> Session:
    session = store.get(credentials.credentials) if credentials else None
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


def require_permission(permission: Permission):
    """Dependency factory: the current session, if its user holds *permission*.

    A denial is reported as 403 with ``outcome: access_restricted`` so the
    client can show the restricted state rather than a failure.
    """
    def _check(
        session: Session = Depends(get_session),
        access: AccessControl = Depends(get_access_control),
    ) -> Session:
        if not access.has_permission(session.user, permission):
            logger.warning("Permission %s denied for %s", permission.value, session.user.email)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"outcome": "access_restricted", "permission": permission.value},
            )
        return session

    return _check
