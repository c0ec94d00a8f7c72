"""
Activity logging service.

Every mutating action (and every login) leaves one activity record
attributed to the acting user.
"""

from __future__ import annotations

import logging
from typing import Optional

from kpi_dashboard.interfaces.log_repository import IActivityLogRepository
from kpi_dashboard.models.logs import ActivityLog, ActivityLogCreate
from kpi_dashboard.models.user import User

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Writes activity records through the activity log repository."""

    def __init__(self, activity_repo: IActivityLogRepository):
        self.activity_repo = activity_repo

    async def record(
        self,
        actor: Optional[User],
        action: str,
        affected_table: str,
        record_id: str = "",
        details: str = "",
    ) -> Optional[ActivityLog]:
        """Append an activity record. Nothing is written without an actor."""
        if actor is None:
            logger.debug(f"Skipping activity {action}: no acting user")
            return None
        logger.info(f"{action} on {affected_table} {record_id} by {actor.id}: {details}")
        return await self.activity_repo.add(
            ActivityLogCreate(
                user_id=actor.id,
                user_full_name=actor.full_name,
                action=action,
                affected_table=affected_table,
                record_id=record_id,
                details=details,
            )
        )
