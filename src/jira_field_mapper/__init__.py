"""
Jira Field Mapper

Maps field values of Jira revisions to Azure DevOps work item fields, driven
by a declarative mapping configuration.
"""

from __future__ import annotations

from .cli import main
from .config import FieldMappingRule, MappingConfig, TypeMapping, ValueMapping, load_config
from .exceptions import (
    ConfigError,
    FieldMappingError,
    InvalidArgumentError,
    MissingArgumentError,
    ResourceNotFoundError,
)
from .field_mapper import (
    FieldMapper,
    MappingResult,
    map_array,
    map_remaining_work,
    map_sprint,
    map_tags,
    map_title,
    map_title_without_key,
)
from .models import Attachment, AttachmentAction, Revision
from .rank import RANK_SENTINEL, LexoRankCodec
from .rendered_html import HtmlFieldRewriter
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "RANK_SENTINEL",
    "Attachment",
    "AttachmentAction",
    "ConfigError",
    "FieldMapper",
    "FieldMappingError",
    "FieldMappingRule",
    "HtmlFieldRewriter",
    "InvalidArgumentError",
    "LexoRankCodec",
    "MappingConfig",
    "MappingResult",
    "MissingArgumentError",
    "ResourceNotFoundError",
    "Revision",
    "TypeMapping",
    "ValueMapping",
    "load_config",
    "main",
    "map_array",
    "map_remaining_work",
    "map_sprint",
    "map_tags",
    "map_title",
    "map_title_without_key",
    "setup_logging",
]
