"""Immutable input contracts for the relationship network engine."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOGGER = logging.getLogger(__name__)


class _FrozenBaseModel(BaseModel):
    """Base model enforcing immutability after creation."""

    model_config = ConfigDict(frozen=True)


class EntityCategory(str, Enum):
    """Fixed set of contact categories plus a fallback bucket."""

    FOUNDERS = "Founders"
    EXECUTIVES = "Executives"
    ADVISORS = "Advisors"
    BANKERS = "Bankers"
    LAWYERS = "Lawyers"
    INVESTORS = "Investors"
    ACCOUNTANTS = "Accountants"
    BOARD = "Board"
    UNCATEGORIZED = "Uncategorized"


class Entity(_FrozenBaseModel):
    """A person or organisation displayed as one node of the network."""

    id: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    title: str = ""
    company: str = Field("", description="Display name of the employer.")
    employer_id: Optional[str] = Field(None, description="Identifier used for same-employer links.")
    category: EntityCategory = EntityCategory.UNCATEGORIZED
    affinity_score: float = Field(..., ge=0.0, le=100.0)
    transaction_ids: Tuple[str, ...] = ()

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Any:
        """Map categories outside the fixed set onto ``Uncategorized``.

        Args:
            value: Raw category value supplied by the data source.

        Returns:
            Any: An ``EntityCategory`` member or a value pydantic can coerce to one.
        """
        if isinstance(value, EntityCategory):
            return value
        try:
            return EntityCategory(value)
        except ValueError:
            LOGGER.warning("Unknown entity category %r; using %s", value, EntityCategory.UNCATEGORIZED.value)
            return EntityCategory.UNCATEGORIZED

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        letters = "".join(part[0] for part in (self.first_name, self.last_name) if part)
        return letters or "?"
