from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from app.services.etl.utils import to_decimal

@dataclass
class RowError:
    message: str
    row_num: int | None = None
    column: str | None = None

    def __str__(self) -> str:
        if self.row_num is None:
            return self.message
        return f"Line {self.row_num}: {self.message}"

def is_zero_or_blank(v: Any) -> bool:
    if v is None or (isinstance(v, str) and not v.strip()):
        return True
    d = to_decimal(v)
    return d is not None and d == Decimal("0")
