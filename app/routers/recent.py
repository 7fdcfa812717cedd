"""Recent-updates endpoint: aggregates a site's pages into the listing views."""

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.models.recent_request import RecentUpdatesRequest
from app.models.recent_response import RecentUpdatesResponse
from app.services.aggregator import aggregate, default_excluded_urls
from app.services.normalizer import generate_slug
from app.services.renderer import render_html, render_markdown_page

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Recent updates"])

_FORMATS = ("json", "html", "markdown")

# Download name when the listing URL yields no slug, e.g. the site root
_DEFAULT_FILENAME = "recent-updates"


@router.post(
    "/recent-updates",
    response_model=RecentUpdatesResponse,
    summary="Build the recent-updates listing for a site",
    description=(
        "Takes the site's page collection (url, title, date, description) "
        "and returns the most recently updated pages together with the same "
        "pages grouped by month.  The 404 page, the listing page itself and "
        "site infrastructure URLs are always left out, as are untitled pages.\n\n"
        "Pass `?format=html` for the rendered HTML fragment or "
        "`?format=markdown` for a complete listing page with YAML frontmatter."
    ),
)
@limiter.limit("30/minute")
async def recent_updates(
    request: Request,
    body: RecentUpdatesRequest,
    format: str = Query(default="json", description="Output format: 'json', 'html' or 'markdown'."),
) -> RecentUpdatesResponse | Response:
    """Aggregate *body.pages* into the recent list and the month groups."""
    logger.info(
        "Recent updates request received",
        extra={
            "pages": len(body.pages),
            "limit": body.limit,
            "month_limit": body.month_limit,
            "format": format,
        },
    )

    if format not in _FORMATS:
        logger.warning("Unsupported output format requested: %s", format)
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported format '{format}'. Use one of: {', '.join(_FORMATS)}.",
        )

    excluded = default_excluded_urls(body.listing_url) | set(body.excluded_urls)
    result = aggregate(
        body.pages,
        excluded_urls=excluded,
        limit=body.limit,
        month_limit=body.month_limit,
        build_time=body.build_time,
    )

    if format == "html":
        return HTMLResponse(render_html(result, body.base_url))
    if format == "markdown":
        return _build_markdown_response(result, body)
    return result


def _build_markdown_response(
    result: RecentUpdatesResponse, body: RecentUpdatesRequest
) -> Response:
    """Return the listing page as a downloadable Markdown file.

    The filename follows the listing URL, e.g. ``/recent-updates/`` becomes
    ``recent-updates.md``.
    """
    filename = f"{generate_slug(body.listing_url, fallback=_DEFAULT_FILENAME)}.md"
    return Response(
        content=render_markdown_page(result, body.base_url),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
