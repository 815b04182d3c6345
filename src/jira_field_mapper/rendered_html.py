"""Post-processing of rendered (HTML) Jira field values."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from . import utils
from .exceptions import MissingArgumentError, ResourceNotFoundError
from .markup import rewrite_html
from .models import field_value_to_text

if TYPE_CHECKING:
    from collections.abc import Callable

    from .models import FieldValue, Revision

logger: logging.Logger = logging.getLogger(__name__)

STYLESHEET_RESOURCE: Final[str] = "jirastyles.css"


class HtmlFieldRewriter:
    """Rewrites rendered field HTML and prepends the Jira stylesheet."""

    _sanitizer: Callable[[str], str]
    _resource_reader: Callable[[str], str]
    _stylesheet: str | None

    def __init__(
        self,
        sanitizer: Callable[[str], str] = rewrite_html,
        *,
        resource_reader: Callable[[str], str] = utils.read_resource,
    ) -> None:
        self._sanitizer = sanitizer
        self._resource_reader = resource_reader
        self._stylesheet = None

    @property
    def stylesheet(self) -> str:
        """The embedded stylesheet, read once. Empty if it cannot be read."""
        if self._stylesheet is None:
            try:
                self._stylesheet = self._resource_reader(STYLESHEET_RESOURCE)
            except ResourceNotFoundError as e:
                logger.debug(f"Stylesheet unavailable: {e}")
                self._stylesheet = ""
        return self._stylesheet

    def rewrite(self, value: FieldValue, revision: Revision) -> str:
        """Rewrite a rendered field value for the target system.

        Args:
            value: Rendered HTML of the field
            revision: Revision the value belongs to

        Returns:
            Styled HTML, or the value unchanged if it is blank

        Raises:
            MissingArgumentError: If value is None
        """
        if value is None:
            msg = "Rendered value must not be None"
            raise MissingArgumentError(msg)

        html = field_value_to_text(value)
        if not html.strip():
            return html

        # No-op pass: added attachment URLs are replaced with themselves
        for action in revision.attachment_actions:
            url = action.value.url
            if action.change_type == "Added" and url and url.strip() and url in html:
                html = html.replace(url, url)

        html = self._sanitizer(html)

        css = self.stylesheet
        if not css.strip():
            logger.warning(f"Could not read css styles for rendered field in {revision.origin_id}.")
            return html

        return f"<style>{css}</style>{html}"
