"""
setstr: string setters for protobuf-tagged Go structs.

Parses Go source, collects struct fields carrying ``protobuf:"...,name=x"``
tags and generates typed setters, a ``Ptr()`` helper and a string-keyed
``SetString`` dispatch for each struct.
"""

from setstr.errors import GoSyntaxError, SaveError, SetstrError
from setstr.model import FieldMeta, ImportEntry, null_filter, suffix_filter
from setstr.pipeline import parse_dir, parse_file, parse_path
from setstr.savers import FileSaver, MemorySaver, StreamSaver

__version__ = "0.1.0"

__all__ = [
    "FieldMeta", "ImportEntry", "FileSaver", "MemorySaver", "StreamSaver",
    "GoSyntaxError", "SaveError", "SetstrError",
    "null_filter", "suffix_filter", "parse_dir", "parse_file", "parse_path",
]
