"""
Entry data models for zipzap.

This module defines the row stored for every tracked directory and the
summary returned by a legacy import.
"""

from typing import Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class Entry(BaseModel):
    """
    One tracked directory.

    Attributes:
        path: Normalized absolute path, unique in the store
        rank: Visit weight, increased by visits and decayed by aging
        last_access: Unix timestamp (seconds) of the most recent visit
    """

    path: str = Field(..., min_length=1, description="Normalized absolute path")
    rank: float = Field(..., ge=0, description="Visit weight")
    last_access: int = Field(..., description="Unix timestamp of the most recent visit")

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject blank paths."""
        if not v.strip():
            raise ValueError("Entry path cannot be blank")
        return v

    def last_access_datetime(self) -> datetime:
        """Get the last access time as a local datetime."""
        return datetime.fromtimestamp(self.last_access)

    def to_line(self, separator: str = "|") -> str:
        """Render the entry in the legacy ``path|rank|time`` format."""
        rank = repr(self.rank)
        if rank.endswith(".0"):
            rank = rank[:-2]
        return f"{self.path}{separator}{rank}{separator}{self.last_access}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary representation."""
        return self.model_dump()

    def __str__(self) -> str:
        return f"{self.path} (rank {self.rank:.2f}, last access {self.last_access_datetime().isoformat()})"


class ImportResult(BaseModel):
    """
    Outcome of a legacy import.

    Attributes:
        processed: Number of records read from the payload
        applied: Records that were inserted or overwrote an older row
        skipped: Records ignored because the stored row was as new or newer
        cleared: Whether existing rows were deleted first
    """

    processed: int = Field(0, ge=0)
    applied: int = Field(0, ge=0)
    skipped: int = Field(0, ge=0)
    cleared: bool = False

    def __str__(self) -> str:
        return f"imported {self.processed} rows"
