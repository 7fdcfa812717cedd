"""URL and text normalisation utilities: path comparison, slugs, frontmatter."""

import re
import unicodedata
from urllib.parse import urlparse


def normalize_path(url: str) -> str:
    """Reduce a page URL to a comparable site path.

    Scheme, host, query string and fragment are dropped, a trailing
    ``index.html`` is removed and trailing slashes are stripped (except for
    the site root), so ``/guide/``, ``/guide`` and ``/guide/index.html``
    all compare equal.
    """
    path = urlparse(url.strip()).path or "/"
    if not path.startswith("/"):
        path = "/" + path

    if path.endswith("/index.html"):
        path = path[: -len("index.html")]

    return path.rstrip("/") or "/"


def generate_slug(text: str, fallback: str = "section") -> str:
    """Generate a clean anchor slug from *text*.

    The slug is lowercased, ASCII-only, and uses hyphens as separators.
    *fallback* is returned when nothing slug-worthy is left.
    """
    # Normalise unicode, keep only ASCII
    slug = unicodedata.normalize("NFKD", text)
    slug = slug.encode("ascii", "ignore").decode("ascii")

    # Lowercase and replace runs of non-alphanumeric chars with a single hyphen
    slug = re.sub(r"[^a-z0-9]+", "-", slug.lower())
    slug = slug.strip("-")

    return slug or fallback


def make_frontmatter(title: str, description: str, **extra: object) -> str:
    """Return a YAML frontmatter block for use in Markdown files.

    String values in *extra* are double-quoted; booleans and numbers are
    written as YAML scalars.
    """
    lines = [
        "---",
        f'title: "{_escape_yaml(title)}"',
        f'description: "{_escape_yaml(description)}"',
    ]
    for key, value in extra.items():
        if isinstance(value, bool):
            lines.append(f"{key}: {'true' if value else 'false'}")
        elif isinstance(value, (int, float)):
            lines.append(f"{key}: {value}")
        else:
            lines.append(f'{key}: "{_escape_yaml(str(value))}"')
    lines.append("---")
    return "\n".join(lines)


def _escape_yaml(value: str) -> str:
    """Escape characters that would break inline double-quoted YAML strings."""
    return value.replace("\\", "\\\\").replace('"', '\\"')
