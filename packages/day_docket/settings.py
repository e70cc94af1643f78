"""Run configuration for the import pipeline.

Every component takes an :class:`ImportSettings` explicitly instead of reading
process-wide state, so extraction and date arithmetic stay deterministic in
tests. :meth:`ImportSettings.from_env` is the only place that consults the
environment; the CLI calls it after loading ``.env``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

# Entities (stores) that share the pipeline. Each posts to its own tenant.
ENTITIES: frozenset[str] = frozenset({"pw", "wb"})


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of hours, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class ImportSettings:
    """Configuration shared by the extractor, reconciler and transformer.

    Attributes
    ----------
    tz_offset_hours:
        Organisation timezone as an offset from UTC in hours (fractional
        offsets such as 9.5 are allowed).
    entity:
        Store code (``"pw"`` or ``"wb"``); selects the daily-docket contact and
        the in-store-use expense account.
    walk_in_customer_id:
        Account used for charges written without a customer reference.
    special_customer_id / special_account_code:
        The one customer whose sales post to the alternate revenue account.
    """

    tz_offset_hours: float = 10.0
    entity: str | None = None
    input_path: Path | None = None
    sheet_name: str = "A4 Summary"
    walk_in_customer_id: str = "10528"
    special_customer_id: str = "45678"
    default_account_code: str = "41010"
    special_account_code: str = "42010"
    rounding_account_code: str = "62650"
    exempt_tax_type: str = "EXEMPTOUTPUT"
    # Read-only after construction; excluded from the hash.
    daily_contact_ids: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if self.entity is not None and self.entity not in ENTITIES:
            raise ValueError(
                f"Unknown entity {self.entity!r}; expected one of {sorted(ENTITIES)}"
            )
        object.__setattr__(
            self, "daily_contact_ids", MappingProxyType(dict(self.daily_contact_ids))
        )

    @property
    def store_expense_account_code(self) -> str:
        return "51310" if self.entity == "wb" else "51130"

    @property
    def daily_contact_id(self) -> str | None:
        if self.entity is None:
            return None
        return self.daily_contact_ids.get(self.entity)

    @classmethod
    def from_env(cls, *, entity: str | None = None) -> ImportSettings:
        """Build settings from ``DAY_DOCKET_*`` environment variables."""

        input_raw = os.getenv("DAY_DOCKET_INPUT_PATH")
        contacts = {
            key: value
            for key, value in (
                ("pw", os.getenv("DAY_DOCKET_CONTACT_ID_PW")),
                ("wb", os.getenv("DAY_DOCKET_CONTACT_ID_WB")),
            )
            if value
        }
        return cls(
            tz_offset_hours=_env_float("DAY_DOCKET_TZ_OFFSET", 10.0),
            entity=entity or os.getenv("DAY_DOCKET_ENTITY") or None,
            input_path=Path(input_raw) if input_raw else None,
            daily_contact_ids=contacts,
        )


__all__ = ["ENTITIES", "ImportSettings"]
