"""Tag-library aggregation and resolution for template compilers."""

from __future__ import annotations

from loguru import logger

from taglookup.errors import (
    InvalidMigratorError,
    InvalidTaglibError,
    InvalidTransformerError,
    TaglibError,
)
from taglookup.lookup import TaglibLookup
from taglookup.types import STOP, Attribute, Tag, TagLibrary, Transformer, Visit

__version__ = "0.1.0"

# Silent unless an application opts in with logger.enable("taglookup")
logger.disable("taglookup")

__all__ = [
    "STOP",
    "Attribute",
    "InvalidMigratorError",
    "InvalidTaglibError",
    "InvalidTransformerError",
    "Tag",
    "TagLibrary",
    "TaglibError",
    "TaglibLookup",
    "Transformer",
    "Visit",
]
