"""
Seed demo data: two teams, one user per role and a month of CQ entries.

Usage:
    python -m scripts.seed_demo_data          # Dry-run (shows what will be created)
    python -m scripts.seed_demo_data --apply   # Actually insert data

Every demo account uses the password ``123456``.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import random
from datetime import date, timedelta

from kpi_dashboard.core.config import get_settings
from kpi_dashboard.core.security import create_access_token
from kpi_dashboard.models.enums import Role, TaskName
from kpi_dashboard.models.kpi_entry import KpiEntryCreate
from kpi_dashboard.models.team import TeamCreate, TeamUpdate
from kpi_dashboard.models.user import UserCreate
from kpi_dashboard.utils.duration import seconds_to_duration

# Suppress noisy SQLAlchemy logs during seed
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine.Engine").setLevel(logging.WARNING)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
PASSWORD = "123456"
DAYS = 30
TEAMS = ("Alpha", "Bravo")


def _users() -> list[dict]:
    return [
        {"key": "owner", "team": None, "create": UserCreate(
            full_name="Olivia Owner", email="owner@demo.com", role=Role.OWNER, password=PASSWORD)},
        {"key": "supervisor", "team": None, "create": UserCreate(
            full_name="Sam Supervisor", email="supervisor@demo.com", role=Role.SUPERVISOR, password=PASSWORD)},
        {"key": "leader", "team": "Alpha", "create": UserCreate(
            full_name="Lee Leader", email="leader@demo.com", role=Role.TEAM_LEADER, password=PASSWORD)},
        {"key": "assistant", "team": "Alpha", "create": UserCreate(
            full_name="Ash Assistant", email="assistant@demo.com", role=Role.ASSISTANT, password=PASSWORD)},
        {"key": "agent1", "team": "Alpha", "create": UserCreate(
            full_name="Ava Agent", email="agent1@demo.com", role=Role.AGENT, password=PASSWORD)},
        {"key": "agent2", "team": "Alpha", "create": UserCreate(
            full_name="Ben Agent", email="agent2@demo.com", role=Role.AGENT, password=PASSWORD)},
        {"key": "agent3", "team": "Bravo", "create": UserCreate(
            full_name="Cai Agent", email="agent3@demo.com", role=Role.AGENT, password=PASSWORD)},
    ]


def _cq_metrics(rng: random.Random) -> dict:
    """Plausible CQ metrics for an 8-hour shift."""
    return {
        "duty_hours": 8,
        "attendance": rng.choice([5, 5, 5, 4, 3]),
        "login": seconds_to_duration(rng.randint(7 * 3600, 8 * 3600)),
        "on_queue": seconds_to_duration(rng.randint(5 * 3600, 7 * 3600 + 1800)),
        "avg_talk": seconds_to_duration(rng.randint(150, 420)),
        "asa": float(rng.randint(0, 12)),
        "mistakes": float(rng.choice([0, 0, 0, 1, 2])),
        "bonus": float(rng.choice([0, 0, 1, 2])),
        "qa_percent": float(rng.randint(25, 35)),
        "pk_percent": float(rng.randint(6, 10)),
    }


async def seed(*, dry_run: bool = True) -> None:
    from kpi_dashboard.infrastructure.local.database import init_db

    await init_db()

    if dry_run:
        print("=" * 60)
        print("  DRY RUN - showing what will be created")
        print("=" * 60)
        _print_plan()
        return

    from kpi_dashboard.infrastructure.local.kpi_entry_repository import SqliteKpiEntryRepository
    from kpi_dashboard.infrastructure.local.kpi_factor_repository import SqliteKpiFactorRepository
    from kpi_dashboard.infrastructure.local.log_repository import (
        SqliteActivityLogRepository,
        SqliteAuditLogRepository,
    )
    from kpi_dashboard.infrastructure.local.team_repository import SqliteTeamRepository
    from kpi_dashboard.infrastructure.local.user_repository import SqliteUserRepository
    from kpi_dashboard.services.activity_log_service import ActivityLogger
    from kpi_dashboard.services.kpi_entry_service import KpiEntryService
    from kpi_dashboard.services.kpi_factor_service import KpiFactorService
    from kpi_dashboard.services.user_service import TeamService, UserService

    user_repo = SqliteUserRepository()
    team_repo = SqliteTeamRepository()
    activity = ActivityLogger(SqliteActivityLogRepository())
    users = UserService(user_repo, team_repo, activity)
    teams = TeamService(team_repo, user_repo, activity)
    entries = KpiEntryService(SqliteKpiEntryRepository(), team_repo, SqliteAuditLogRepository(), activity)

    if await user_repo.get_by_email("owner@demo.com"):
        print("Demo data already present (owner@demo.com exists); nothing to do.")
        return

    settings = get_settings()

    # ---- 1. Factors ----
    config = await KpiFactorService(SqliteKpiFactorRepository(), activity).get_config()
    print(f"\n--- KPI factors v{config.version} ({len(config.factors)} factors) ---")

    # ---- 2. Teams ----
    print("\n--- Creating Teams ---")
    team_ids = {}
    for name in TEAMS:
        team = await teams.create(TeamCreate(name=name))
        team_ids[name] = team.id
        print(f"  [OK] {name:10s} id={team.id}")

    # ---- 3. Users ----
    print("\n--- Creating Users ---")
    created = {}
    for u in _users():
        data = u["create"]
        if u["team"]:
            data = data.model_copy(update={"team_id": team_ids[u["team"]]})
        user = await users.create(data)
        created[u["key"]] = user
        print(f"  [OK] {u['key']:10s} id={user.id}  email={user.email}")
        if settings.AUTH_PROVIDER == "local" and settings.LOCAL_JWT_SECRET:
            token = create_access_token(str(user.id), settings)
            print(f"        token={token[:40]}...")

    await teams.update(
        team_ids["Alpha"],
        TeamUpdate(leader_id=created["leader"].id, assistant_id=created["assistant"].id),
    )

    # ---- 4. KPI entries ----
    print("\n--- Creating KPI Entries ---")
    rng = random.Random(42)
    today = date.today()
    for u in _users():
        user = created[u["key"]]
        if user.role != Role.AGENT:
            continue
        for offset in range(DAYS):
            day = today - timedelta(days=offset)
            await entries.create(
                KpiEntryCreate(
                    user_id=user.id,
                    agent_name=user.full_name,
                    team=u["team"],
                    date=day,
                    task=TaskName.CQ,
                    **_cq_metrics(rng),
                )
            )
        print(f"  [OK] {user.full_name:12s} {DAYS} CQ entries")

    print("\nDone. Log in with any demo email and password " + PASSWORD)


def _print_plan() -> None:
    print(f"\nTeams ({len(TEAMS)}): {', '.join(TEAMS)}")

    print(f"\nUsers ({len(_users())}):")
    for u in _users():
        print(f"  - {u['key']:10s} ({u['create'].email}, {u['create'].role.value}, team: {u['team'] or '-'})")

    agents = [u for u in _users() if u["create"].role == Role.AGENT]
    print(f"\nKPI Entries ({len(agents) * DAYS}): {DAYS} days of CQ metrics per agent")

    print("\n-> run again with --apply to insert")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed demo users, teams and KPI entries."
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Actually insert data. Default is dry-run.",
    )
    args = parser.parse_args()
    asyncio.run(seed(dry_run=not args.apply))


if __name__ == "__main__":
    main()
