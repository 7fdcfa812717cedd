"""Recent-updates aggregation over a site's page collection.

Given every page the static-site generator knows about, this module derives
the two views shown on the "recent updates" listing page:

* a flat list of the most recently dated pages, and
* the same pages grouped by calendar month, most recent month first.

Every function here is pure: the page collection and the build time are
passed in explicitly, nothing is mutated, and the same input always yields
the same output.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from app.models.page import Page
from app.models.recent_response import MonthEntry, MonthGroup, RecentEntry, RecentUpdatesResponse
from app.services.normalizer import generate_slug, normalize_path

logger = logging.getLogger(__name__)

RECENT_LIMIT = 20
MONTH_LIMIT = 6

RECENT_DESCRIPTION_LENGTH = 100
MONTH_DESCRIPTION_LENGTH = 80

NO_DESCRIPTION = "No description available"
ELLIPSIS = "..."

DISPLAY_DATE_FORMAT = "%B %d, %Y"
MONTH_LABEL_FORMAT = "%B %Y"

LISTING_URL = "/recent-updates/"
NOT_FOUND_URL = "/404.html"

# Generator-owned outputs that are pages in name only
INFRASTRUCTURE_URLS = frozenset({"/", "/feed.xml", "/sitemap.xml", "/robots.txt"})


def default_excluded_urls(listing_url: str = LISTING_URL) -> Set[str]:
    """Return the normalised URLs that never appear in either view."""
    urls = {NOT_FOUND_URL, listing_url, *INFRASTRUCTURE_URLS}
    return {normalize_path(u) for u in urls}


def eligible_pages(pages: Iterable[Page], excluded_urls: Iterable[str]) -> List[Page]:
    """Drop excluded and untitled pages, keeping input order."""
    excluded = {normalize_path(u) for u in excluded_urls}
    kept: List[Page] = []
    for page in pages:
        if normalize_path(page.url) in excluded:
            continue
        if not page.title or not page.title.strip():
            continue
        kept.append(page)
    return kept


def effective_date(page: Page, build_time: datetime) -> datetime:
    """Return the page's own date, or *build_time* for undated pages."""
    return page.date if page.date is not None else build_time


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so they order against aware ones
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def truncate_description(text: Optional[str], length: int) -> Optional[str]:
    """Cut *text* to at most *length* characters, ellipsis included.

    Returns *None* for a missing or blank description so the caller decides
    on a placeholder.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    if len(text) <= length:
        return text
    keep = max(length - len(ELLIPSIS), 0)
    return text[:keep] + ELLIPSIS


def format_display_date(value: datetime) -> str:
    """Render *value* as ``Month DD, YYYY``."""
    return value.strftime(DISPLAY_DATE_FORMAT)


def _resolve(
    excluded_urls: Optional[Iterable[str]], build_time: Optional[datetime]
) -> Tuple[Set[str], datetime]:
    excluded = set(excluded_urls) if excluded_urls is not None else default_excluded_urls()
    return excluded, build_time or datetime.now(timezone.utc)


def _sorted_by_recency(pages: Sequence[Page], build_time: datetime) -> List[Page]:
    # sorted() is stable with reverse=True, so ties keep their input order
    return sorted(
        pages, key=lambda p: _as_utc(effective_date(p, build_time)), reverse=True
    )


def build_recent_list(
    pages: Iterable[Page],
    excluded_urls: Optional[Iterable[str]] = None,
    limit: int = RECENT_LIMIT,
    build_time: Optional[datetime] = None,
) -> List[RecentEntry]:
    """Return the *limit* most recently dated eligible pages, newest first.

    Args:
        pages:          The generator's page collection, in any order.
        excluded_urls:  URLs to leave out.  *None* means
                        :func:`default_excluded_urls`.
        limit:          Maximum number of entries.
        build_time:     Date used for undated pages (default: now, UTC).

    Returns:
        Up to *limit* entries, each with a display date and a description
        cut to :data:`RECENT_DESCRIPTION_LENGTH` characters (or
        :data:`NO_DESCRIPTION`).
    """
    excluded, build_time = _resolve(excluded_urls, build_time)
    candidates = eligible_pages(pages, excluded)

    entries: List[RecentEntry] = []
    for page in _sorted_by_recency(candidates, build_time)[:limit]:
        when = effective_date(page, build_time)
        description = truncate_description(page.description, RECENT_DESCRIPTION_LENGTH)
        entries.append(
            RecentEntry(
                url=page.url,
                title=page.title.strip(),
                date=_as_utc(when),
                display_date=format_display_date(when),
                description=description or NO_DESCRIPTION,
                dated=page.date is not None,
            )
        )
    return entries


def build_month_groups(
    pages: Iterable[Page],
    excluded_urls: Optional[Iterable[str]] = None,
    month_limit: int = MONTH_LIMIT,
    build_time: Optional[datetime] = None,
) -> List[MonthGroup]:
    """Group eligible pages by calendar month, most recent month first.

    Months are ordered by ``(year, month)``, never by their label, so
    ``January 2025`` comes before ``December 2024``.  Only the *month_limit*
    most recent months are kept; pages inside a month keep input order.
    """
    excluded, build_time = _resolve(excluded_urls, build_time)
    candidates = eligible_pages(pages, excluded)

    buckets: Dict[Tuple[int, int], List[Page]] = {}
    for page in candidates:
        when = effective_date(page, build_time)
        buckets.setdefault((when.year, when.month), []).append(page)

    groups: List[MonthGroup] = []
    for year, month in sorted(buckets, reverse=True)[:month_limit]:
        label = datetime(year, month, 1).strftime(MONTH_LABEL_FORMAT)
        groups.append(
            MonthGroup(
                label=label,
                year=year,
                month=month,
                anchor=generate_slug(label),
                pages=[
                    MonthEntry(
                        url=page.url,
                        title=page.title.strip(),
                        description=truncate_description(
                            page.description, MONTH_DESCRIPTION_LENGTH
                        ),
                    )
                    for page in buckets[(year, month)]
                ],
            )
        )
    return groups


def aggregate(
    pages: Sequence[Page],
    excluded_urls: Optional[Iterable[str]] = None,
    limit: int = RECENT_LIMIT,
    month_limit: int = MONTH_LIMIT,
    build_time: Optional[datetime] = None,
) -> RecentUpdatesResponse:
    """Compute both views over the same page collection and build time."""
    excluded, build_time = _resolve(excluded_urls, build_time)
    considered = len(eligible_pages(pages, excluded))
    logger.debug(
        "Aggregating recent updates",
        extra={"pages_total": len(pages), "pages_considered": considered},
    )

    return RecentUpdatesResponse(
        build_time=_as_utc(build_time),
        pages_considered=considered,
        recent=build_recent_list(pages, excluded, limit, build_time),
        months=build_month_groups(pages, excluded, month_limit, build_time),
    )
