from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal as Money


@dataclass
class Invoice:
    id: int
    total: Money
    paid: bool
    lines: list[str]
