from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.page import Page, parse_site_datetime
from app.services.aggregator import LISTING_URL, MONTH_LIMIT, RECENT_LIMIT


class RecentUpdatesRequest(BaseModel):
    pages: List[Page] = Field(default_factory=list)
    build_time: Optional[datetime] = Field(
        default=None,
        description="Build timestamp used as the date of undated pages. Defaults to the current UTC time.",
    )
    listing_url: str = Field(
        default=LISTING_URL,
        description="URL of the listing page itself; it never lists itself.",
    )
    excluded_urls: List[str] = Field(
        default_factory=list,
        description="Extra page URLs to leave out, on top of the 404 page and site infrastructure URLs.",
        examples=[["/drafts/", "/search.html"]],
    )
    limit: int = Field(
        default=RECENT_LIMIT,
        ge=1,
        le=100,
        description="Maximum number of entries in the recent-updates table (1–100).",
    )
    month_limit: int = Field(
        default=MONTH_LIMIT,
        ge=1,
        le=24,
        description="Maximum number of month groups (1–24).",
    )
    base_url: str = Field(
        default="",
        description="Site base path prefixed to every rendered link, e.g. '/docs'.",
    )

    @field_validator("build_time", mode="before")
    @classmethod
    def _parse_jekyll_build_time(cls, value: Any) -> Any:
        return parse_site_datetime(value)
