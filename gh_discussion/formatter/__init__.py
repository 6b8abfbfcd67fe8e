"""Output formatting for discussions."""

from .output import Formatter, filter_fields, to_json_tree
from .template import OutputTemplate
from .timefmt import format_relative_time, truncate_string

__all__ = [
    "Formatter",
    "OutputTemplate",
    "filter_fields",
    "format_relative_time",
    "to_json_tree",
    "truncate_string",
]
