from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class RecentEntry(BaseModel):
    url: str
    title: str
    date: datetime
    """Effective date in UTC; naive page dates are read as UTC."""
    display_date: str
    description: str
    dated: bool
    """``False`` when the page had no date of its own and the build time was used."""


class MonthEntry(BaseModel):
    url: str
    title: str
    description: Optional[str] = None


class MonthGroup(BaseModel):
    label: str
    year: int
    month: int
    anchor: str
    pages: List[MonthEntry]


class RecentUpdatesResponse(BaseModel):
    build_time: datetime
    pages_considered: int
    recent: List[RecentEntry]
    months: List[MonthGroup]
