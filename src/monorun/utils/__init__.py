"""Standalone helpers: output formats and filtered copying."""

from monorun.utils.copy import copy_filtered, load_ignore_patterns, should_ignore
from monorun.utils.formats import OutputFormat, serialize

__all__ = [
    "OutputFormat",
    "copy_filtered",
    "load_ignore_patterns",
    "serialize",
    "should_ignore",
]
