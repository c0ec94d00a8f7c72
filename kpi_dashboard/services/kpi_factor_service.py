"""
KPI factor configuration service.

Owns every edit to the factor list. The list is always saved whole, so
every operation here reads the current list, applies a change, validates
the result and writes it back.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from kpi_dashboard.core.exceptions import (
    BusinessLogicError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from kpi_dashboard.interfaces.kpi_factor_repository import IKpiFactorRepository
from kpi_dashboard.models.kpi_entry import RESERVED_ROW_KEYS
from kpi_dashboard.models.kpi_factor import (
    KpiFactor,
    KpiFactorConfig,
    KpiFactorCreate,
    KpiFactorUpdate,
)
from kpi_dashboard.models.user import User
from kpi_dashboard.services.activity_log_service import ActivityLogger
from kpi_dashboard.services.kpi_factor_defaults import get_default_factors

logger = logging.getLogger(__name__)

CUSTOM_FORMULA = "Direct Value"
_WHITESPACE = re.compile(r"\s+")
_EDITABLE_FIELDS = ("key", "display_name", "weight", "description", "formula")


def normalize_factor_key(raw: str) -> str:
    """
    Normalize a custom factor key.

    Example:
        >>> normalize_factor_key("  Upsell Count ")
        'upsell_count'
    """
    return _WHITESPACE.sub("_", raw.strip().lower())


def ensure_key_not_reserved(key: str) -> None:
    if key in RESERVED_ROW_KEYS:
        raise ValidationError(f"Factor key '{key}' is reserved for an entry column")


def validate_factor_list(factors: list[KpiFactor], current: Optional[list[KpiFactor]] = None) -> None:
    """
    Check a candidate factor list before it is saved.

    Raises:
        ValidationError: A key shadows an exported entry column
        DuplicateError: Repeated key or calculation source
        BusinessLogicError: A system factor lost its source, a locked factor
            was edited or removed, or a non-custom factor has no source
    """
    seen_keys: set[str] = set()
    seen_sources = set()
    for factor in factors:
        ensure_key_not_reserved(factor.key)
        if factor.key in seen_keys:
            raise DuplicateError(f"Factor key '{factor.key}' must be unique")
        seen_keys.add(factor.key)
        if factor.calculation_source is not None:
            if factor.calculation_source in seen_sources:
                raise DuplicateError(
                    f"Calculation source '{factor.calculation_source.value}' is already bound"
                )
            seen_sources.add(factor.calculation_source)
        elif not factor.is_custom:
            raise BusinessLogicError(f"Factor '{factor.key}' must be custom or have a calculation source")

    if current is None:
        return

    new_by_source = {f.calculation_source: f for f in factors if f.calculation_source is not None}
    new_by_key = {f.key: f for f in factors}

    for old in current:
        if old.calculation_source is not None:
            replacement = new_by_source.get(old.calculation_source)
            same_key = new_by_key.get(old.key)
            if same_key is not None and same_key.calculation_source != old.calculation_source:
                raise BusinessLogicError(
                    f"Calculation source of system factor '{old.key}' cannot be changed"
                )
        else:
            replacement = new_by_key.get(old.key)
            if replacement is not None and not replacement.is_custom:
                raise BusinessLogicError(f"Custom factor '{old.key}' cannot become a system factor")

        if replacement is None:
            if not old.is_deletable:
                raise BusinessLogicError(f"Factor '{old.key}' cannot be deleted")
            continue
        if replacement.is_custom != old.is_custom:
            raise BusinessLogicError(f"Factor '{old.key}' cannot change its custom flag")
        if not old.is_editable and _edited(old, replacement):
            raise BusinessLogicError(f"Factor '{old.key}' is not editable")


def _edited(old: KpiFactor, new: KpiFactor) -> bool:
    return any(getattr(old, field) != getattr(new, field) for field in _EDITABLE_FIELDS)


class KpiFactorService:
    """Reads and edits the factor configuration."""

    def __init__(self, factor_repo: IKpiFactorRepository, activity: Optional[ActivityLogger] = None):
        self.factor_repo = factor_repo
        self.activity = activity

    async def get_config(self) -> KpiFactorConfig:
        """Current configuration. The default catalog is stored on first read."""
        config = await self.factor_repo.get_config()
        if config is None:
            logger.info("No factor configuration found; seeding defaults")
            config = await self.factor_repo.save(get_default_factors())
        return config

    async def list_factors(self) -> list[KpiFactor]:
        config = await self.get_config()
        return config.factors

    async def replace_factors(self, factors: list[KpiFactor], actor: Optional[User] = None) -> KpiFactorConfig:
        current = await self.list_factors()
        validate_factor_list(factors, current)
        return await self._save(factors, actor, "Updated KPI calculation factors.")

    async def add_custom_factor(self, data: KpiFactorCreate, actor: Optional[User] = None) -> KpiFactor:
        key = normalize_factor_key(data.key)
        display_name = data.display_name.strip()
        if not key or not display_name:
            raise ValidationError("Factor key and display name are required")
        ensure_key_not_reserved(key)

        factors = await self.list_factors()
        if any(f.key == key for f in factors):
            raise DuplicateError(f"Factor key '{key}' must be unique")

        factor = KpiFactor(
            key=key,
            display_name=display_name,
            weight=data.weight,
            description=data.description,
            formula=CUSTOM_FORMULA,
            is_custom=True,
            is_editable=True,
            is_deletable=True,
        )
        await self._save([*factors, factor], actor, f"Added custom factor {key}.")
        return factor

    async def update_factor(self, key: str, update: KpiFactorUpdate, actor: Optional[User] = None) -> KpiFactor:
        factors = await self.list_factors()
        index = _index_of(factors, key)
        current = factors[index]
        if not current.is_editable:
            raise BusinessLogicError(f"Factor '{key}' is not editable")

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if "key" in changes:
            new_key = changes["key"].strip()
            if not new_key:
                raise ValidationError("Factor key is required")
            if current.is_custom:
                new_key = normalize_factor_key(new_key)
            ensure_key_not_reserved(new_key)
            if new_key != key and any(f.key == new_key for f in factors):
                raise DuplicateError(f"Factor key '{new_key}' must be unique")
            if new_key != key and not current.is_custom:
                logger.warning(
                    f"System factor key renamed from '{key}' to '{new_key}'; calculation is unchanged"
                )
            changes["key"] = new_key

        updated = current.model_copy(update=changes)
        factors = [*factors[:index], updated, *factors[index + 1:]]
        await self._save(factors, actor, f"Updated factor {key}.")
        return updated

    async def delete_factors(self, keys: Iterable[str], actor: Optional[User] = None) -> list[str]:
        """Delete factors by key. All keys must exist and be deletable."""
        keys = list(dict.fromkeys(keys))
        if not keys:
            return []
        factors = await self.list_factors()
        by_key = {f.key: f for f in factors}
        for key in keys:
            factor = by_key.get(key)
            if factor is None:
                raise NotFoundError(f"Factor '{key}' not found")
            if not factor.is_deletable:
                raise BusinessLogicError(f"Factor '{key}' cannot be deleted")

        doomed = set(keys)
        remaining = [f for f in factors if f.key not in doomed]
        await self._save(remaining, actor, f"Deleted factors: {', '.join(keys)}.")
        return keys

    async def _save(self, factors: list[KpiFactor], actor: Optional[User], details: str) -> KpiFactorConfig:
        config = await self.factor_repo.save(factors)
        logger.info(f"Saved factor configuration v{config.version} ({len(factors)} factors)")
        if self.activity:
            await self.activity.record(actor, "UPDATE_KPI_FACTORS", "settings", "", details)
        return config


def _index_of(factors: list[KpiFactor], key: str) -> int:
    for index, factor in enumerate(factors):
        if factor.key == key:
            return index
    raise NotFoundError(f"Factor '{key}' not found")
