"""Render computed recent-updates views as HTML or as a Markdown listing page."""

from urllib.parse import urlparse

from jinja2 import Environment, StrictUndefined

from app.models.recent_response import RecentUpdatesResponse
from app.services.normalizer import make_frontmatter

LISTING_TITLE = "Recent Updates"
LISTING_DESCRIPTION = "Recently added and updated pages across the site."


def _site_link(url: str, base_url: str) -> str:
    """Prefix *url* with the site base path unless it is already absolute."""
    if urlparse(url).scheme or not base_url:
        return url
    return base_url.rstrip("/") + "/" + url.lstrip("/")


_env = Environment(
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
_env.filters["site_link"] = _site_link

_FRAGMENT_TEMPLATE = _env.from_string(
    """\
<table class="recent-updates">
  <thead>
    <tr>
      <th>Page</th>
      <th>Last Updated</th>
      <th>Description</th>
    </tr>
  </thead>
  <tbody>
{% for entry in recent %}
    <tr>
      <td><a href="{{ entry.url | site_link(base_url) }}">{{ entry.title }}</a></td>
      <td>{{ entry.display_date }}</td>
      <td>{{ entry.description }}</td>
    </tr>
{% endfor %}
  </tbody>
</table>
{% for group in months %}

<h3 id="{{ group.anchor }}">{{ group.label }}</h3>
<ul>
{% for page in group.pages %}
  <li><a href="{{ page.url | site_link(base_url) }}">{{ page.title }}</a>{% if page.description %} - {{ page.description }}{% endif %}</li>
{% endfor %}
</ul>
{% endfor %}
"""
)


def render_html(result: RecentUpdatesResponse, base_url: str = "") -> str:
    """Return the listing as an HTML fragment: one table, then one list per month."""
    return _FRAGMENT_TEMPLATE.render(
        recent=result.recent,
        months=result.months,
        base_url=base_url,
    )


def render_markdown_page(
    result: RecentUpdatesResponse,
    base_url: str = "",
    title: str = LISTING_TITLE,
) -> str:
    """Return a complete Markdown listing page (frontmatter + HTML body).

    The output can be written straight into the site's content directory;
    the generator passes raw HTML blocks through untouched.
    """
    frontmatter = make_frontmatter(
        title,
        LISTING_DESCRIPTION,
        layout="default",
        nav_exclude=True,
    )
    body = render_html(result, base_url)
    return f"{frontmatter}\n\n# {title}\n\n{body}"
