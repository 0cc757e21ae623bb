"""Pydantic models for the loosely-typed property and owner inputs.

Inputs arrive from the database layer or the web client as partial JSON
objects. Every field is optional and numeric fields are coerced leniently:
values that cannot be read as numbers become ``None`` and the analytics fall
back to their documented defaults instead of failing.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ..errors import InvalidInputError
from ..utils.coerce import to_float, to_int, to_optional_str

PROPERTY_TYPES = ("residential", "commercial", "industrial", "land")


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys and serializes as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AreaInfo(CamelModel):
    population: Optional[float] = None
    median_income: Optional[float] = None

    @field_validator("population", "median_income", mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> Optional[float]:
        return to_float(v)


class PropertyLocation(CamelModel):
    city_info: Optional[AreaInfo] = None
    county_info: Optional[AreaInfo] = None


class OwnerRef(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return to_optional_str(v)


class PropertyRecord(CamelModel):
    id: Optional[str] = None
    address: Optional[str] = None
    property_type: Optional[str] = None
    square_footage: Optional[float] = None
    year_built: Optional[int] = None
    current_value: Optional[float] = None
    assessed_value: Optional[float] = None
    tax_amount: Optional[float] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[PropertyLocation] = None
    owners: List[OwnerRef] = Field(default_factory=list)

    @field_validator(
        "square_footage",
        "current_value",
        "assessed_value",
        "tax_amount",
        "bedrooms",
        "bathrooms",
        "latitude",
        "longitude",
        mode="before",
    )
    @classmethod
    def _coerce_float(cls, v: Any) -> Optional[float]:
        return to_float(v)

    @field_validator("year_built", mode="before")
    @classmethod
    def _coerce_year(cls, v: Any) -> Optional[int]:
        return to_int(v)

    @field_validator("id", "address", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return to_optional_str(v)

    @field_validator("property_type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Optional[str]:
        text = to_optional_str(v)
        return text.lower() if text else None

    @field_validator("city", "state", mode="before")
    @classmethod
    def _flatten_place(cls, v: Any) -> Optional[str]:
        # The ORM returns related rows ({"name": ..., "code": ...}); the client sends plain strings.
        if isinstance(v, dict):
            v = v.get("code") or v.get("name")
        return to_optional_str(v)

    @field_validator("owners", mode="before")
    @classmethod
    def _default_owners(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def county_median_income(self) -> Optional[float]:
        if self.location and self.location.county_info:
            return self.location.county_info.median_income
        return None

    @property
    def city_population(self) -> Optional[float]:
        if self.location and self.location.city_info:
            return self.location.city_info.population
        return None


class WealthBreakdownItem(CamelModel):
    id: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    percentage: Optional[float] = None
    confidence: Optional[float] = None

    @field_validator("amount", "percentage", "confidence", mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> Optional[float]:
        return to_float(v)

    @field_validator("id", "category", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return to_optional_str(v)


class Ownership(CamelModel):
    id: Optional[str] = None
    is_active: bool = True
    ownership_percent: Optional[float] = None
    property: Optional[PropertyRecord] = None

    @field_validator("ownership_percent", mode="before")
    @classmethod
    def _coerce_percent(cls, v: Any) -> Optional[float]:
        return to_float(v)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return to_optional_str(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def _default_active(cls, v: Any) -> Any:
        return True if v is None else v


class OwnerRecord(CamelModel):
    id: Optional[str] = None
    type: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    entity_name: Optional[str] = None
    estimated_net_worth: Optional[float] = None
    wealth_confidence: Optional[float] = None
    occupation: Optional[str] = None
    industry: Optional[str] = None
    date_of_birth: Optional[date] = None
    wealth_breakdown: List[WealthBreakdownItem] = Field(default_factory=list)
    ownerships: List[Ownership] = Field(default_factory=list)

    @field_validator("estimated_net_worth", "wealth_confidence", mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> Optional[float]:
        return to_float(v)

    @field_validator(
        "id", "type", "first_name", "last_name", "entity_name", "occupation", "industry", mode="before"
    )
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return to_optional_str(v)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> Optional[date]:
        if v is None or v == "":
            return None
        parsed = pd.to_datetime(v, errors="coerce")
        if pd.isna(parsed):
            return None
        return parsed.date()

    @field_validator("wealth_breakdown", "ownerships", mode="before")
    @classmethod
    def _default_list(cls, v: Any) -> Any:
        return [] if v is None else v


class SavedPropertyRow(CamelModel):
    """A property saved by a user, with their notes and tags."""

    id: Optional[str] = None
    property: PropertyRecord = Field(default_factory=PropertyRecord)
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(tag) for tag in v]
        return v

    @field_validator("notes", "created_at", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return to_optional_str(v)


def as_property(value: Any) -> PropertyRecord:
    """Accept a PropertyRecord or a plain mapping; anything else is malformed."""

    if isinstance(value, PropertyRecord):
        return value
    if not isinstance(value, Mapping):
        raise InvalidInputError(f"property must be a mapping, got {type(value).__name__}")
    try:
        return PropertyRecord.model_validate(value)
    except ValidationError as exc:
        raise InvalidInputError(f"malformed property: {exc}") from exc


def as_property_list(values: Any, name: str = "properties") -> List[PropertyRecord]:
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Sequence):
        raise InvalidInputError(f"{name} must be a list, got {type(values).__name__}")
    return [as_property(value) for value in values]


__all__ = [
    "PROPERTY_TYPES",
    "as_property",
    "as_property_list",
    "CamelModel",
    "AreaInfo",
    "PropertyLocation",
    "OwnerRef",
    "PropertyRecord",
    "WealthBreakdownItem",
    "Ownership",
    "OwnerRecord",
    "SavedPropertyRow",
]
