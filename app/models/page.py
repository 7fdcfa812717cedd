from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Formats Jekyll writes for front matter dates and site.time; anything else
# is left to pydantic's own ISO 8601 parsing.
JEKYLL_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",  # 2025-07-01 10:00:00 +0200
    "%Y-%m-%d %H:%M:%S",     # 2025-07-01 10:00:00
    "%Y-%m-%d %H:%M %z",     # 2025-07-01 10:00 +0200
    "%Y-%m-%d %H:%M",        # 2025-07-01 10:00
)


def parse_site_datetime(value: Any) -> Any:
    """Convert a Jekyll-style timestamp string into a :class:`datetime`.

    Values that match none of :data:`JEKYLL_DATE_FORMATS` are returned
    unchanged so pydantic can validate them as usual.
    """
    if not isinstance(value, str):
        return value
    raw = value.strip()
    for fmt in JEKYLL_DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    return raw


class Page(BaseModel):
    """One content page as handed over by the static-site generator."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: Optional[str] = None
    date: Optional[datetime] = None
    """Publication / last-update timestamp.  Undated pages fall back to the build time."""
    description: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Page url must not be empty.")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_jekyll_date(cls, value: Any) -> Any:
        return parse_site_datetime(value)
