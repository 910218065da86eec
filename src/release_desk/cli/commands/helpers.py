"""Formatting helpers shared by command handlers."""

from datetime import datetime

from release_desk.domain.platform import Platform


def format_date(value: datetime | None) -> str:
    """Short date for table output."""
    return value.strftime("%Y-%m-%d") if value else "-"


def parse_platform(value: str | None) -> Platform | None:
    """Map a --platform argument to a Platform."""
    return Platform.from_wire(value) if value else None


def truncate(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` characters with an ellipsis."""
    flat = " ".join(text.split())
    if len(flat) <= width:
        return flat
    return flat[: width - 1] + "…"
