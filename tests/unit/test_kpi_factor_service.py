"""
Unit tests for factor configuration edits.
"""

from typing import Optional

import pytest

from kpi_dashboard.core.exceptions import BusinessLogicError, DuplicateError, NotFoundError, ValidationError
from kpi_dashboard.models.enums import CalculationSource, Role
from kpi_dashboard.models.kpi_factor import KpiFactor, KpiFactorConfig, KpiFactorCreate, KpiFactorUpdate
from kpi_dashboard.services.kpi_factor_defaults import get_default_factors
from kpi_dashboard.services.kpi_factor_service import (
    KpiFactorService,
    normalize_factor_key,
    validate_factor_list,
)
from tests.helpers import make_user


class FakeFactorRepo:
    def __init__(self, factors: Optional[list[KpiFactor]] = None):
        self.config = KpiFactorConfig(version=1, factors=factors) if factors is not None else None
        self.saves = 0

    async def get_config(self) -> Optional[KpiFactorConfig]:
        return self.config

    async def save(self, factors: list[KpiFactor]) -> KpiFactorConfig:
        version = self.config.version + 1 if self.config else 1
        self.config = KpiFactorConfig(version=version, factors=list(factors))
        self.saves += 1
        return self.config


class FakeActivity:
    def __init__(self):
        self.records = []

    async def record(self, actor, action, affected_table, record_id="", details=""):
        self.records.append((action, affected_table, details))


def _custom(key: str) -> KpiFactor:
    return KpiFactor(key=key, display_name=key, weight=5, is_custom=True, formula="Direct Value")


@pytest.fixture
def owner():
    return make_user(Role.OWNER)


def test_normalize_factor_key():
    assert normalize_factor_key("  Upsell   Count ") == "upsell_count"
    assert normalize_factor_key("NPS") == "nps"


class TestValidateFactorList:
    def test_defaults_are_valid(self):
        validate_factor_list(get_default_factors())

    def test_duplicate_key(self):
        with pytest.raises(DuplicateError):
            validate_factor_list([_custom("a"), _custom("a")])

    def test_reserved_column_key(self):
        with pytest.raises(ValidationError, match="reserved"):
            validate_factor_list([_custom("agent_name")])

    def test_duplicate_source(self):
        factors = get_default_factors()
        clone = factors[0].model_copy(update={"key": "Attendance again"})
        with pytest.raises(DuplicateError):
            validate_factor_list(factors + [clone])

    def test_system_factor_needs_source(self):
        orphan = KpiFactor(key="orphan", display_name="Orphan")
        with pytest.raises(BusinessLogicError):
            validate_factor_list([orphan])

    def test_source_cannot_move_to_another_key(self):
        current = get_default_factors()
        changed = [
            f.model_copy(update={"calculation_source": CalculationSource.PK})
            if f.key == "QA %" else f
            for f in current
            if f.key != "PK %"
        ]
        with pytest.raises(BusinessLogicError):
            validate_factor_list(changed, current)

    def test_locked_factor_cannot_be_removed(self):
        current = [f.model_copy(update={"is_deletable": False}) for f in get_default_factors()]
        with pytest.raises(BusinessLogicError):
            validate_factor_list(current[1:], current)

    def test_locked_factor_cannot_be_edited(self):
        current = [f.model_copy(update={"is_editable": False}) for f in get_default_factors()]
        edited = [current[0].model_copy(update={"weight": 50})] + current[1:]
        with pytest.raises(BusinessLogicError):
            validate_factor_list(edited, current)

    def test_custom_flag_is_fixed(self):
        current = [_custom("upsell")]
        flipped = KpiFactor(key="upsell", display_name="upsell", calculation_source=CalculationSource.BONUS)
        with pytest.raises(BusinessLogicError):
            validate_factor_list([flipped], current)

    def test_renaming_a_system_key_is_allowed(self):
        current = get_default_factors()
        renamed = [current[0].model_copy(update={"key": "Presence"})] + current[1:]
        validate_factor_list(renamed, current)


class TestKpiFactorService:
    @pytest.mark.asyncio
    async def test_first_read_seeds_defaults(self):
        repo = FakeFactorRepo()
        config = await KpiFactorService(repo).get_config()
        assert config.version == 1
        assert [f.key for f in config.factors] == [f.key for f in get_default_factors()]
        assert repo.saves == 1

    @pytest.mark.asyncio
    async def test_existing_config_is_not_reseeded(self):
        repo = FakeFactorRepo([_custom("only")])
        factors = await KpiFactorService(repo).list_factors()
        assert [f.key for f in factors] == ["only"]
        assert repo.saves == 0

    @pytest.mark.asyncio
    async def test_add_custom_factor(self, owner):
        repo = FakeFactorRepo(get_default_factors())
        activity = FakeActivity()
        service = KpiFactorService(repo, activity)

        factor = await service.add_custom_factor(
            KpiFactorCreate(key=" Upsell Count ", display_name=" Upsells ", weight=5), actor=owner
        )

        assert factor.key == "upsell_count"
        assert factor.display_name == "Upsells"
        assert factor.is_custom and factor.is_editable and factor.is_deletable
        assert factor.formula == "Direct Value"
        assert factor.calculation_source is None
        assert repo.config.factors[-1].key == "upsell_count"
        assert repo.config.version == 2
        assert activity.records[0][:2] == ("UPDATE_KPI_FACTORS", "settings")

    @pytest.mark.asyncio
    async def test_add_custom_factor_requires_key_and_name(self, owner):
        service = KpiFactorService(FakeFactorRepo([]))
        with pytest.raises(ValidationError):
            await service.add_custom_factor(KpiFactorCreate(key="  ", display_name="X"), actor=owner)
        with pytest.raises(ValidationError):
            await service.add_custom_factor(KpiFactorCreate(key="x", display_name=""), actor=owner)

    @pytest.mark.asyncio
    async def test_add_custom_factor_rejects_duplicates(self, owner):
        service = KpiFactorService(FakeFactorRepo([_custom("upsell")]))
        with pytest.raises(DuplicateError):
            await service.add_custom_factor(KpiFactorCreate(key="UPSELL", display_name="Upsell"), actor=owner)

    @pytest.mark.asyncio
    async def test_update_weight(self, owner):
        repo = FakeFactorRepo(get_default_factors())
        updated = await KpiFactorService(repo).update_factor("QA %", KpiFactorUpdate(weight=40), actor=owner)
        assert updated.weight == 40
        assert updated.calculation_source == CalculationSource.QA
        assert next(f for f in repo.config.factors if f.key == "QA %").weight == 40

    @pytest.mark.asyncio
    async def test_rename_system_factor_keeps_source(self, owner):
        repo = FakeFactorRepo(get_default_factors())
        updated = await KpiFactorService(repo).update_factor(
            "Attendance %", KpiFactorUpdate(key="Presence %"), actor=owner
        )
        assert updated.key == "Presence %"
        assert updated.calculation_source == CalculationSource.ATTENDANCE
        assert repo.config.factors[0].key == "Presence %"

    @pytest.mark.asyncio
    async def test_rename_to_existing_key(self, owner):
        service = KpiFactorService(FakeFactorRepo(get_default_factors()))
        with pytest.raises(DuplicateError):
            await service.update_factor("QA %", KpiFactorUpdate(key="PK %"), actor=owner)

    @pytest.mark.asyncio
    async def test_keys_cannot_shadow_entry_columns(self, owner):
        repo = FakeFactorRepo(get_default_factors())
        service = KpiFactorService(repo)
        with pytest.raises(ValidationError):
            await service.update_factor("QA %", KpiFactorUpdate(key="Overall %"), actor=owner)
        with pytest.raises(ValidationError):
            await service.update_factor("QA %", KpiFactorUpdate(key="date"), actor=owner)
        with pytest.raises(ValidationError):
            await service.add_custom_factor(KpiFactorCreate(key=" Team ", display_name="Team"), actor=owner)
        assert repo.saves == 0

    @pytest.mark.asyncio
    async def test_update_unknown_factor(self, owner):
        service = KpiFactorService(FakeFactorRepo(get_default_factors()))
        with pytest.raises(NotFoundError):
            await service.update_factor("nope", KpiFactorUpdate(weight=1), actor=owner)

    @pytest.mark.asyncio
    async def test_update_locked_factor(self, owner):
        locked = _custom("locked").model_copy(update={"is_editable": False})
        service = KpiFactorService(FakeFactorRepo([locked]))
        with pytest.raises(BusinessLogicError):
            await service.update_factor("locked", KpiFactorUpdate(weight=1), actor=owner)

    @pytest.mark.asyncio
    async def test_delete_factors(self, owner):
        repo = FakeFactorRepo(get_default_factors() + [_custom("upsell")])
        deleted = await KpiFactorService(repo).delete_factors(["upsell", "Bonus %", "upsell"], actor=owner)
        assert deleted == ["upsell", "Bonus %"]
        assert {"upsell", "Bonus %"}.isdisjoint(f.key for f in repo.config.factors)

    @pytest.mark.asyncio
    async def test_delete_non_deletable(self, owner):
        locked = _custom("locked").model_copy(update={"is_deletable": False})
        repo = FakeFactorRepo([locked])
        with pytest.raises(BusinessLogicError):
            await KpiFactorService(repo).delete_factors(["locked"], actor=owner)
        assert repo.saves == 0

    @pytest.mark.asyncio
    async def test_replace_factors_validates(self, owner):
        repo = FakeFactorRepo(get_default_factors())
        with pytest.raises(DuplicateError):
            await KpiFactorService(repo).replace_factors([_custom("a"), _custom("a")], actor=owner)

    @pytest.mark.asyncio
    async def test_replace_factors_bumps_version(self, owner):
        repo = FakeFactorRepo(get_default_factors())
        config = await KpiFactorService(repo).replace_factors(get_default_factors()[:3], actor=owner)
        assert config.version == 2
        assert len(config.factors) == 3
