"""Clean up Jira-rendered HTML before it is stored in Azure DevOps."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

logger: logging.Logger = logging.getLogger(__name__)

_URL_ATTRIBUTES = ("href", "src")


def _is_relative(url: str) -> bool:
    return not url.startswith(("http://", "https://", "mailto:", "data:", "#", "//"))


def rewrite_html(html: str, *, base_url: str | None = None) -> str:
    """Normalize rendered HTML from a Jira field.

    - drops <script> elements and inline event handler attributes (onclick, ...)
    - unwraps Jira's <span class="image-wrap"> around images
    - resolves relative href/src references against base_url, when given

    Args:
        html: Rendered HTML fragment
        base_url: Jira base URL used for relative references

    Returns:
        The rewritten HTML fragment
    """
    if not html.strip():
        return html

    soup = BeautifulSoup(html, "html.parser")

    for script in soup.find_all("script"):
        script.decompose()

    for wrapper in soup.select("span.image-wrap"):
        wrapper.unwrap()

    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        for attr in [name for name in tag.attrs if name.lower().startswith("on")]:
            del tag[attr]
        if base_url:
            for attr in _URL_ATTRIBUTES:
                value = tag.get(attr)
                if isinstance(value, str) and value and _is_relative(value):
                    tag[attr] = urljoin(base_url, value)
                    logger.debug(f"Resolved relative {attr} '{value}' -> '{tag[attr]}'")

    return str(soup)
