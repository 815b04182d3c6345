"""
Command-line interface for previewing the field mapping of a revision.
"""

from __future__ import annotations

import argparse
import functools
import json
import logging
import sys
from pathlib import Path

from .config import load_config
from .exceptions import FieldMappingError
from .field_mapper import FieldMapper
from .markup import rewrite_html
from .models import Revision
from .rendered_html import HtmlFieldRewriter
from .utils import setup_logging


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Map the fields of a Jira revision to Azure DevOps fields")

    # Positional arguments
    _ = parser.add_argument("config", help="Path to the JSON mapping configuration")
    _ = parser.add_argument("revision", help="Path to a JSON document describing one Jira revision")

    # Optional arguments
    _ = parser.add_argument("--base-url", help="Jira base URL used to resolve relative links in rendered fields")

    _ = parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    # Setup logging
    verbose: bool = getattr(args, "verbose", False)
    setup_logging(verbose=verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
        revision = Revision.from_dict(json.loads(Path(args.revision).read_text(encoding="utf-8")))

        base_url: str | None = getattr(args, "base_url", None)
        sanitizer = functools.partial(rewrite_html, base_url=base_url)
        mapper = FieldMapper(config, html_rewriter=HtmlFieldRewriter(sanitizer))

        mapped = mapper.map_revision(revision)
    except (FieldMappingError, OSError, json.JSONDecodeError):
        logger.exception("Field mapping failed")
        sys.exit(1)

    print(json.dumps(mapped, indent=2, default=str, ensure_ascii=False))
    sys.exit(0)
