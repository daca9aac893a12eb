import posixpath
from dataclasses import dataclass
from typing import Callable, Dict, List


@dataclass(frozen=True)
class FieldMeta:
    field_name: str
    field_type: str  # as written: "int", "pkg.Type", "*pkg.Type"
    tag_name: str


@dataclass(frozen=True)
class ImportEntry:
    alias: str  # "" means the package's default name
    path: str   # quoted, as written in source

    @property
    def name(self) -> str:
        """Name the generated code refers to this import by."""
        return self.alias or default_import_name(self.path)


TypeMetadata = Dict[str, List[FieldMeta]]

# (file_name, type_name, field_name, field_type) -> include?
Filter = Callable[[str, str, str, str], bool]

# (file_name, package_name, imports, metadata) -> None, raises on failure
Saver = Callable[[str, str, List[ImportEntry], TypeMetadata], None]


def default_import_name(path: str) -> str:
    return posixpath.basename(path.strip('"'))


def null_filter(file_name, type_name, field_name, field_type):
    return True


def suffix_filter(*suffixes):
    """Accepts only fields whose declared type ends with one of ``suffixes``."""
    def accept(file_name, type_name, field_name, field_type):
        return field_type.endswith(suffixes)
    return accept
