"""
Unit tests for the user import CSV parser.
"""

from uuid import uuid4

import pytest

from kpi_dashboard.core.exceptions import ValidationError
from kpi_dashboard.models.enums import Role
from kpi_dashboard.services.user_service import parse_user_import

HEADER = "full_name,email,password,role,team_name\n"


@pytest.fixture
def teams():
    return {"alpha": uuid4()}


def test_parses_rows(teams):
    text = HEADER + "Ava Agent,ava@demo.com,123456,Agent,Alpha\nSam Super,sam@demo.com,pw,Supervisor,\n"
    users = parse_user_import(text, teams)
    assert [u.email for u in users] == ["ava@demo.com", "sam@demo.com"]
    assert users[0].role == Role.AGENT
    assert users[0].team_id == teams["alpha"]
    assert users[1].team_id is None


def test_team_lookup_ignores_case(teams):
    users = parse_user_import(HEADER + "Ava,ava@demo.com,pw,Agent,ALPHA\n", teams)
    assert users[0].team_id == teams["alpha"]


def test_blank_lines_are_skipped(teams):
    users = parse_user_import(HEADER + "\n,,,,\nAva,ava@demo.com,pw,Agent,\n", teams)
    assert len(users) == 1


def test_header_only(teams):
    assert parse_user_import(HEADER, teams) == []


def test_missing_fields(teams):
    with pytest.raises(ValidationError, match="Row 2: Missing required fields"):
        parse_user_import(HEADER + "Ava,ava@demo.com,,Agent,\n", teams)


def test_short_row_counts_as_missing(teams):
    with pytest.raises(ValidationError, match="Row 2"):
        parse_user_import(HEADER + "Ava,ava@demo.com\n", teams)


def test_invalid_role(teams):
    with pytest.raises(ValidationError, match="Row 3: Invalid role 'Boss'"):
        parse_user_import(
            HEADER + "Ava,ava@demo.com,pw,Agent,\nBob,bob@demo.com,pw,Boss,\n", teams
        )


def test_unknown_team(teams):
    with pytest.raises(ValidationError, match="Team 'Zulu' not found"):
        parse_user_import(HEADER + "Ava,ava@demo.com,pw,Agent,Zulu\n", teams)
