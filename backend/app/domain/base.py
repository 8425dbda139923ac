"""
Shared base for domain models

Author: DP Team
Date: 2025-06-02
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict


def to_jsonable(value: Any) -> Any:
    """Convert Decimal to float and dates to ISO strings, recursively"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


class DomainModel(BaseModel):
    """
    Base for response models built from ORM rows

    Usage:
        Product.model_validate(row).to_dict()
    """
    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return to_jsonable(self.model_dump())
