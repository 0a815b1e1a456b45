from __future__ import annotations
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from langtrend.domain.entities import LanguagePercentage


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, not 2)."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part: int, total: int) -> float:
    """Share of `part` in `total` as a percentage with 2 decimal places."""
    if total <= 0:
        return 0.0
    return round_half_up(part / total * 10000) / 100


def normalize(bytes_by_language: Mapping[str, int]) -> list[LanguagePercentage]:
    """
    Turn a language -> bytes map into percentage records, largest first.

    Works the same for one repository's /languages payload and for the
    byte-wise union across a whole account. Ties keep the input order
    because list.sort is stable.
    """
    total = sum(bytes_by_language.values())
    result = [
        LanguagePercentage(name=name, value=percentage(count, total), bytes=count)
        for name, count in bytes_by_language.items()
    ]
    result.sort(key=lambda p: p.value, reverse=True)
    return result
