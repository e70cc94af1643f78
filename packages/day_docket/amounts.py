"""Decimal helpers shared by the extractor, verifier and transformer.

Spreadsheet cells arrive as ``float``/``int`` (or numeric text); every amount
is converted through :func:`money` so comparisons happen at the two-decimal
precision shown on the sheet.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def money(raw: Any) -> Decimal:
    """Return ``raw`` as a ``Decimal`` quantized to cents.

    Floats go through ``str`` first so ``12.1`` becomes ``12.10`` rather than
    its binary expansion. Raises ``ValueError`` for non-numeric input.
    """

    if isinstance(raw, bool):
        raise ValueError(f"invalid amount: {raw!r}")
    try:
        d = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {raw!r}") from exc
    if not d.is_finite():
        raise ValueError(f"invalid amount: {raw!r}")
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def total(amounts: Any) -> Decimal:
    return money(sum((money(a) for a in amounts), ZERO))


__all__ = ["CENT", "ZERO", "money", "total"]
