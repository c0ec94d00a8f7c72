"""
KPI factor models.

A factor is one weighted (or direct) term of the Overall % score. System
factors are bound to a built-in calculator through an immutable
calculation source; custom factors read a value straight from the entry.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from kpi_dashboard.models.enums import CalculationSource


class KpiFactor(BaseModel):
    """Single factor definition."""

    key: str = Field(..., min_length=1, max_length=100, description="Unique, user-editable key")
    calculation_source: Optional[CalculationSource] = Field(
        None, description="Built-in calculator binding (system factors only)"
    )
    display_name: str = Field(..., min_length=1, max_length=200, description="Display label")
    weight: float = Field(
        0.0,
        ge=0,
        description="Percentage for calculated factors, max value for direct factors",
    )
    is_editable: bool = True
    is_deletable: bool = True
    is_custom: bool = False
    description: str = Field(default="", max_length=1000)
    formula: str = Field(default="", max_length=1000)

    @model_validator(mode="after")
    def _custom_has_no_source(self) -> "KpiFactor":
        if self.is_custom and self.calculation_source is not None:
            raise ValueError("custom factors cannot have a calculation_source")
        return self


class KpiFactorCreate(BaseModel):
    """Schema for adding a custom factor."""

    key: str = Field(..., max_length=100, description="Key (normalized on save)")
    display_name: str = Field(..., max_length=200)
    weight: float = Field(0.0, ge=0)
    description: str = Field(default="", max_length=1000)


class KpiFactorUpdate(BaseModel):
    """Schema for editing a factor. Only provided fields are changed."""

    key: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=200)
    weight: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=1000)


class KpiFactorConfig(BaseModel):
    """The whole ordered factor list, versioned on every save."""

    version: int = Field(0, ge=0, description="Incremented on each save")
    factors: list[KpiFactor] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
