"""
Input validation schemas using Pydantic for the sheet API.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Union

from diners.utilities.numbers import try_parse_number


class SheetRef(BaseModel):
    """Identifies one (account, year, month) sheet."""
    account_id: str = Field(..., min_length=1, max_length=64)
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)

    @field_validator('account_id')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        v = v.strip()
        if not v:
            raise ValueError('account_id cannot be empty')
        return v


class CellEditInput(SheetRef):
    """Schema for a single cell edit."""
    row_index: int = Field(..., ge=0, le=30)
    key: str = Field(..., min_length=1, max_length=64)
    value: Optional[Union[int, float, str]] = None


class PointerInput(SheetRef):
    """Pointer event over a grid cell; col indexes the visible data columns."""
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)
    modifier: bool = True


class FillValueInput(SheetRef):
    """Answer to the range-fill prompt; validated by the selector, not here."""
    value: Optional[str] = None


class WorkingDayInput(SheetRef):
    working_day: Union[int, float, str]

    @field_validator('working_day')
    @classmethod
    def validate_working_day(cls, v):
        """Must be a non-negative number."""
        parsed = try_parse_number(v)
        if parsed is None:
            raise ValueError('working_day must be a number')
        if parsed < 0:
            raise ValueError('working_day cannot be negative')
        return parsed
