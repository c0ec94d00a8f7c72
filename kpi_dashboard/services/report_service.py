"""
Report service.

Everything here scores entries on read with the current factor list, so
reports follow factor edits retroactively.
"""

from __future__ import annotations

import csv
import io
import logging
from collections import defaultdict
from datetime import date
from typing import Any, Iterable, Optional
from uuid import UUID

from kpi_dashboard.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from kpi_dashboard.interfaces.team_repository import ITeamRepository
from kpi_dashboard.interfaces.user_repository import IUserRepository
from kpi_dashboard.models.enums import Role, TaskName
from kpi_dashboard.models.kpi_entry import CalculatedKpi, KpiEntry
from kpi_dashboard.models.report import AgentTaskSummary, KpiFilter, MissingEntries, TeamRank
from kpi_dashboard.models.user import User
from kpi_dashboard.services.kpi_calculator import compute_many, round_score
from kpi_dashboard.services.kpi_entry_service import KpiEntryService
from kpi_dashboard.services.kpi_factor_service import KpiFactorService
from kpi_dashboard.services.permissions import TEAM_SCOPED_ROLES
from kpi_dashboard.utils.datetime_utils import in_periods, month_to_date

logger = logging.getLogger(__name__)


def filter_entries(entries: Iterable[KpiEntry], filters: KpiFilter) -> list[KpiEntry]:
    """Apply report filters. Name and team match case-insensitive substrings."""
    agent_name = filters.agent_name.lower() if filters.agent_name else None
    team = filters.team.lower() if filters.team else None
    result = []
    for entry in entries:
        if agent_name and agent_name not in entry.agent_name.lower():
            continue
        if team and team not in entry.team.lower():
            continue
        if filters.task and entry.task != filters.task:
            continue
        if filters.date_from and entry.date < filters.date_from:
            continue
        if filters.date_to and entry.date > filters.date_to:
            continue
        result.append(entry)
    return result


def rows_to_csv(rows: list[dict[str, Any]]) -> str:
    """Serialize report rows with every value quoted."""
    if not rows:
        raise ValidationError("No data to export")
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(rows[0].keys()),
        quoting=csv.QUOTE_ALL,
        extrasaction="ignore",
        lineterminator="\n",
    )
    writer.writeheader()
    for row in rows:
        writer.writerow({key: "" if value is None else value for key, value in row.items()})
    return buffer.getvalue()


def rank_teams(calculated: Iterable[CalculatedKpi], team_names: Iterable[str]) -> list[tuple[str, float]]:
    """Teams with at least one entry, best average Overall % first."""
    totals: dict[str, list[float]] = defaultdict(list)
    known = set(team_names)
    for kpi in calculated:
        if kpi.team in known:
            totals[kpi.team].append(kpi.overall_percent)
    averages = [(name, sum(values) / len(values)) for name, values in totals.items()]
    averages.sort(key=lambda item: item[1], reverse=True)
    return averages


def summarize_by_task(calculated: Iterable[CalculatedKpi]) -> list[AgentTaskSummary]:
    totals: dict[TaskName, list[float]] = {}
    for kpi in calculated:
        totals.setdefault(kpi.task, []).append(kpi.overall_percent)
    return [
        AgentTaskSummary(
            task=task,
            count=len(values),
            average_overall=round_score(sum(values) / len(values)),
        )
        for task, values in totals.items()
    ]


class ReportService:
    """Aggregated, scored views over KPI entries."""

    def __init__(
        self,
        entry_service: KpiEntryService,
        factor_service: KpiFactorService,
        team_repo: ITeamRepository,
        user_repo: IUserRepository,
        skip_weekends: bool = True,
    ):
        self.entry_service = entry_service
        self.factor_service = factor_service
        self.team_repo = team_repo
        self.user_repo = user_repo
        self.skip_weekends = skip_weekends

    async def list_calculated(
        self,
        actor: User,
        filters: Optional[KpiFilter] = None,
        user_id: Optional[UUID] = None,
    ) -> list[CalculatedKpi]:
        filters = filters or KpiFilter()
        entries = await self.entry_service.list_visible(
            actor,
            user_id=user_id,
            task=filters.task,
            date_from=filters.date_from,
            date_to=filters.date_to,
        )
        entries = filter_entries(entries, filters)
        factors = await self.factor_service.list_factors()
        calculated = compute_many(entries, factors)
        calculated.sort(key=lambda kpi: kpi.date, reverse=True)
        return calculated

    async def export_csv(self, actor: User, filters: Optional[KpiFilter] = None) -> str:
        calculated = await self.list_calculated(actor, filters)
        logger.info(f"Exporting {len(calculated)} KPI rows for {actor.id}")
        return rows_to_csv([kpi.as_row() for kpi in calculated])

    async def _scored_entries(self, **filters: Any) -> list[CalculatedKpi]:
        entries = await self.entry_service.entry_repo.list(**filters)
        factors = await self.factor_service.list_factors()
        return compute_many(entries, factors)

    async def team_rank(self, team_id: UUID, years: list[int], months: list[int]) -> TeamRank:
        teams = await self.team_repo.list()
        team = next((t for t in teams if t.id == team_id), None)
        calculated = [
            kpi for kpi in await self._scored_entries() if in_periods(kpi.date, years, months)
        ]
        ranking = rank_teams(calculated, [t.name for t in teams])
        rank = 0
        if team is not None:
            for index, (name, _) in enumerate(ranking, start=1):
                if name == team.name:
                    rank = index
                    break
        return TeamRank(rank=rank, total_teams=len(ranking))

    async def agent_summary(
        self,
        user_id: UUID,
        years: list[int],
        months: list[int],
        actor: Optional[User] = None,
    ) -> list[AgentTaskSummary]:
        """
        Entry count and average Overall % per task for one agent.

        Agents may only read their own summary, team leads and assistants
        those of their team's members.
        """
        if actor is not None:
            await self._ensure_can_view_agent(actor, user_id)
        calculated = [
            kpi
            for kpi in await self._scored_entries(user_id=user_id)
            if in_periods(kpi.date, years, months)
        ]
        return summarize_by_task(calculated)

    async def _ensure_can_view_agent(self, actor: User, user_id: UUID) -> None:
        if actor.role == Role.AGENT:
            if actor.id != user_id:
                raise ForbiddenError("Agents can only view their own summary")
        elif actor.role in TEAM_SCOPED_ROLES:
            target = await self.user_repo.get(user_id)
            if not target:
                raise NotFoundError(f"User {user_id} not found")
            if actor.team_id is None or target.team_id != actor.team_id:
                raise ForbiddenError("Summaries are limited to your own team")

    async def missing_entries(self, team_id: Optional[UUID], today: date) -> list[MissingEntries]:
        """
        Working days this month on which a team logged fewer entries than it
        has agents.
        """
        if team_id:
            team = await self.team_repo.get(team_id)
            if not team:
                raise NotFoundError(f"Team {team_id} not found")
            teams = [team]
        else:
            teams = await self.team_repo.list()

        results: list[MissingEntries] = []
        first_of_month = today.replace(day=1)
        for team in teams:
            agents = await self.user_repo.list(team_id=team.id, role=Role.AGENT)
            if not agents:
                continue
            entries = await self.entry_service.entry_repo.list(
                team=team.name, date_from=first_of_month, date_to=today
            )
            per_day: dict[date, int] = defaultdict(int)
            for entry in entries:
                per_day[entry.date] += 1
            missing = [
                str(day.day)
                for day in month_to_date(today, skip_weekends=self.skip_weekends)
                if per_day[day] < len(agents)
            ]
            if missing:
                results.append(
                    MissingEntries(team_name=team.name, missing_dates=missing, count=len(missing))
                )
        return results
