"""Built-in plugins and formatters for workspace-meta configurations."""

from .files import conditional_file, ensure_file, ensure_file_from
from .formatters import json_formatter, prettier_formatter
from .json_files import dump_json, ensure_package_json, update_json_file

__all__ = [
    "conditional_file",
    "ensure_file",
    "ensure_file_from",
    "ensure_package_json",
    "update_json_file",
    "dump_json",
    "json_formatter",
    "prettier_formatter",
]
