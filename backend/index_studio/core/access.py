"""
Role-based access control.

Permissions are a closed enum; the role table is built once from plain
strings and every tag is checked against the enum at that point, so a typo
in configuration fails at startup instead of silently denying access.

``AccessControl.has_permission`` is the only authorization check.  A
``False`` answer is an ordinary outcome ("access restricted"), not an error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class Permission(str, Enum):
    MANAGE_USERS = "manage_users"
    MANAGE_CLIENTS = "manage_clients"
    VIEW_ALL_DATA = "view_all_data"
    EDIT_ALL_DATA = "edit_all_data"
    CREATE_ANALYSIS = "create_analysis"
    EDIT_ANALYSIS = "edit_analysis"
    EXPORT_DATA = "export_data"
    SYSTEM_SETTINGS = "system_settings"
    VIEW_LOGS = "view_logs"
    CREATE_INDICES = "create_indices"
    USE_QGIS_TOOLS = "use_qgis_tools"
    VIEW_CLIENTS = "view_clients"
    VIEW_OWN_DATA = "view_own_data"
    VIEW_REPORTS = "view_reports"
    DOWNLOAD_REPORTS = "download_reports"
    VIEW_RECOMMENDATIONS = "view_recommendations"


_PERMISSION_VALUES = frozenset(p.value for p in Permission)


@dataclass(frozen=True)
class Role:
    name: str
    display_name: str
    permissions: frozenset[Permission]


@dataclass(frozen=True)
class User:
    id: int
    email: str
    name: str
    role: str
    attributes: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


class RoleTable:
    def __init__(self, roles: list[Role]):
        self._roles: Mapping[str, Role] = MappingProxyType({r.name: r for r in roles})

    @classmethod
    def from_mapping(cls, raw: dict[str, dict[str, Any]]) -> "RoleTable":
        """Build from ``{"ADMIN": {"name": ..., "permissions": [...]}}``.

        Raises ValueError on any permission tag outside ``Permission``.
        """
        roles = []
        for role_name, entry in raw.items():
            tags = entry.get("permissions", [])
            unknown = [t for t in tags if t not in _PERMISSION_VALUES]
            if unknown:
                raise ValueError(f"Role {role_name}: unknown permissions {unknown}")
            roles.append(Role(
                name=role_name,
                display_name=entry.get("name", role_name),
                permissions=frozenset(Permission(t) for t in tags),
            ))
        return cls(roles)

    def __contains__(self, name: object) -> bool:
        return name in self._roles

    def __iter__(self):
        return iter(self._roles.values())

    def get(self, name: str) -> Role | None:
        return self._roles.get(name)


class AccessControl:
    def __init__(self, roles: RoleTable):
        self._roles = roles

    @property
    def roles(self) -> RoleTable:
        return self._roles

    def permissions_for(self, user: User | None) -> frozenset[Permission]:
        if user is None:
            return frozenset()
        role = self._roles.get(user.role)
        return role.permissions if role else frozenset()

    def has_permission(self, user: User | None, permission: Permission | str) -> bool:
        if not isinstance(permission, Permission):
            if permission not in _PERMISSION_VALUES:
                return False
            permission = Permission(permission)
        granted = permission in self.permissions_for(user)
        if not granted:
            logger.debug(
                "Permission %s denied for %s",
                permission.value,
                user.email if user else "anonymous",
            )
        return granted


# ---------------------------------------------------------------------------
# Default role table
# ---------------------------------------------------------------------------

DEFAULT_ROLES: dict[str, dict[str, Any]] = {
    "ADMIN": {
        "name": "Administrator",
        "permissions": [
            "manage_users", "manage_clients", "view_all_data", "edit_all_data",
            "create_analysis", "export_data", "system_settings", "view_logs",
        ],
    },
    "ANALYST": {
        "name": "Analyst",
        "permissions": [
            "view_all_data", "create_analysis", "edit_analysis", "export_data",
            "create_indices", "use_qgis_tools", "view_clients",
        ],
    },
    "CLIENT": {
        "name": "Client",
        "permissions": [
            "view_own_data", "view_reports", "download_reports", "view_recommendations",
        ],
    },
}

ROLE_TABLE = RoleTable.from_mapping(DEFAULT_ROLES)


# ---------------------------------------------------------------------------
# Application sections and the permission that opens each one
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Section:
    id: str
    label: str
    permission: Permission | None = None


SECTIONS: list[Section] = [
    Section("dashboard", "Dashboard"),
    Section("analysis", "Analysis", Permission.CREATE_ANALYSIS),
    Section("qgis", "QGIS Analysis", Permission.CREATE_ANALYSIS),
    Section("clients", "Clients", Permission.VIEW_CLIENTS),
    Section("reports", "Reports", Permission.VIEW_REPORTS),
    Section("users", "Users", Permission.MANAGE_USERS),
    Section("settings", "Settings", Permission.SYSTEM_SETTINGS),
]


def visible_sections(access: AccessControl, user: User | None) -> list[Section]:
    """Sections *user* may open, in menu order.  Anonymous users get none."""
    if user is None:
        return []
    return [
        s for s in SECTIONS
        if s.permission is None or access.has_permission(user, s.permission)
    ]
