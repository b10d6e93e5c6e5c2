"""Freshness note written to chart metadata after each upload."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from zoneinfo import ZoneInfo

SPANISH_MONTHS = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic")


def format_freshness_note(
    now: datetime | None = None,
    *,
    prefix: str = "Actualizado",
    timezone: str = "Europe/Madrid",
    months: Sequence[str] = SPANISH_MONTHS,
) -> str:
    """Return e.g. ``"Actualizado: 5 mar, 09.07."`` for the given instant.

    Naive datetimes are taken to be UTC.
    """
    if now is None:
        now = datetime.now(tz=ZoneInfo("UTC"))
    elif now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
    local = now.astimezone(ZoneInfo(timezone))
    return f"{prefix}: {local.day} {months[local.month - 1]}, {local:%H}.{local:%M}."


__all__ = ["SPANISH_MONTHS", "format_freshness_note"]
