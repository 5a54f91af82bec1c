"""Adapters - I/O implementations of ports."""

from .timew_export import ExportFormatError, ExtensionInput, parse_export, read_extension_input
from .json_metadata import JsonTaskMetadataStore

__all__ = [
    "ExportFormatError",
    "ExtensionInput",
    "parse_export",
    "read_extension_input",
    "JsonTaskMetadataStore",
]
