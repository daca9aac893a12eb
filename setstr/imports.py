import logging
from typing import Dict, List

from setstr.model import ImportEntry, TypeMetadata, default_import_name

logger = logging.getLogger("setstr.imports")

# Imports the generated code itself uses.
REQUIRED_IMPORTS = (
    ImportEntry("", '"encoding/json"'),
    ImportEntry("", '"errors"'),
    ImportEntry("", '"strconv"'),
)


def resolve_imports(import_table: Dict[str, str], metadata: TypeMetadata) -> List[ImportEntry]:
    """
    Reduces a file's imports to the ones the generated code needs.

    An import is kept when a collected field type is qualified with its alias.
    Aliases equal to the path's default name are dropped. The required
    imports are always added; an entry is kept once per (path, name).
    The result is sorted by path.
    """
    available = dict(import_table)
    claimed = []
    for fields in metadata.values():
        for meta in fields:
            parts = meta.field_type.split(".")
            if len(parts) != 2:
                continue
            alias = parts[0].lstrip("*")
            path = available.pop(alias, None)
            if path is None:
                continue
            if alias == default_import_name(path):
                alias = ""
            claimed.append(ImportEntry(alias, path))

    if available:
        logger.debug("dropping unused imports: %s", ", ".join(sorted(available)))

    resolved = []
    seen = set()
    for entry in claimed + list(REQUIRED_IMPORTS):
        key = (entry.path, entry.name)
        if key in seen:
            continue
        seen.add(key)
        resolved.append(entry)
    resolved.sort(key=lambda entry: (entry.path, entry.alias))
    return resolved
