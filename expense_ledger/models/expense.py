from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .constants import DATE_FORMAT


class ExpenseIn(BaseModel):
    """Caller supplied fields for ``add`` and ``update`` (always the full set)."""

    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: str
    note: Optional[str] = None
    date: dt.date

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("category is required")
        return v

    @field_validator("note")
    @classmethod
    def blank_note_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("date", mode="before")
    @classmethod
    def iso_calendar_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return dt.datetime.strptime(v.strip(), DATE_FORMAT).date()
            except ValueError:
                raise ValueError("date must be YYYY-MM-DD") from None
        if isinstance(v, dt.datetime):
            return v.date()
        return v


@dataclass(frozen=True)
class ExpenseRecord:
    """Immutable snapshot of one persisted row.

    Values are kept exactly as stored. Rows written through the store always
    satisfy ``ExpenseIn``; rows touched out-of-band may not, and aggregation
    copes with that rather than this class.
    """

    id: int
    amount: Any
    category: Optional[str]
    note: Optional[str]
    date: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ExpenseRecord":
        return cls(
            id=int(row["id"]),
            amount=row["amount"],
            category=row["category"],
            note=row["note"],
            date=row["date"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ExpenseOut(BaseModel):
    id: int
    amount: Optional[Union[float, str]]
    category: Optional[str]
    note: Optional[str] = None
    date: Optional[str]
