"""
Utility functions for the Jira field mapper.
"""

from __future__ import annotations

import logging
from importlib import resources

from .exceptions import ResourceNotFoundError


def setup_logging(*, verbose: bool = False) -> None:
    """Configure logging for the field mapping process."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(), logging.FileHandler("field-mapping.log", mode="a")],
    )


def read_resource(name: str) -> str:
    """Read a text resource shipped in the package's resources directory.

    Raises:
        ResourceNotFoundError: If the resource does not exist or cannot be read
    """
    try:
        return resources.files(__package__).joinpath("resources", name).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Embedded resource '{name}' could not be read"
        raise ResourceNotFoundError(msg) from e
