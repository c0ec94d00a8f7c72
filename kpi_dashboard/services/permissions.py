"""
Role-based permissions.

A single role/action matrix decides what each role may do; visibility of
KPI entries is further scoped by team and ownership.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from kpi_dashboard.core.exceptions import ForbiddenError
from kpi_dashboard.models.enums import Role
from kpi_dashboard.models.kpi_entry import KpiEntry
from kpi_dashboard.models.user import User


class Action(str, Enum):
    KPI_READ = "kpi.read"
    KPI_CREATE = "kpi.create"
    KPI_UPDATE = "kpi.update"
    KPI_DELETE = "kpi.delete"
    FACTOR_READ = "factor.read"
    FACTOR_MANAGE = "factor.manage"
    USER_MANAGE = "user.manage"
    TEAM_MANAGE = "team.manage"
    LOG_READ = "log.read"
    REPORT_READ = "report.read"


ALL_ROLES = set(Role)
ADMIN_ROLES = {Role.OWNER, Role.SUPERVISOR}
TEAM_SCOPED_ROLES = {Role.TEAM_LEADER, Role.ASSISTANT}

ROLE_MATRIX: dict[Action, set[Role]] = {
    Action.KPI_READ: ALL_ROLES,
    Action.KPI_CREATE: {Role.OWNER, Role.TEAM_LEADER, Role.ASSISTANT},
    Action.KPI_UPDATE: {Role.OWNER, Role.SUPERVISOR, Role.TEAM_LEADER, Role.ASSISTANT},
    Action.KPI_DELETE: ADMIN_ROLES,
    Action.FACTOR_READ: ALL_ROLES,
    Action.FACTOR_MANAGE: {Role.OWNER},
    Action.USER_MANAGE: ADMIN_ROLES,
    Action.TEAM_MANAGE: ADMIN_ROLES,
    Action.LOG_READ: ADMIN_ROLES,
    Action.REPORT_READ: ALL_ROLES,
}


def roles_for_action(action: Action) -> set[Role]:
    return set(ROLE_MATRIX.get(action, set()))


def role_allows(action: Action, role: Role) -> bool:
    return role in roles_for_action(action)


def ensure_action(user: User, action: Action) -> User:
    if not role_allows(action, user.role):
        raise ForbiddenError(f"Role {user.role.value} cannot perform {action.value}")
    return user


def can_view_entry(user: User, entry: KpiEntry, user_team_name: Optional[str]) -> bool:
    """
    Agents see their own entries, team leads and assistants their team's,
    owners and supervisors everything.
    """
    if user.role in ADMIN_ROLES:
        return True
    if user.role in TEAM_SCOPED_ROLES:
        return user_team_name is not None and entry.team == user_team_name
    return entry.user_id == user.id


def ensure_can_view_entry(user: User, entry: KpiEntry, user_team_name: Optional[str]) -> KpiEntry:
    if not can_view_entry(user, entry, user_team_name):
        raise ForbiddenError("Entry is outside your visibility scope")
    return entry
