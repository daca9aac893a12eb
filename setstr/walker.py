# Copyright (c) 2026 Mohamad Al-Zawahreh (dba Sovereign Systems).
#
# This file is part of setstr.
#
# LICENSE: DUAL-LICENSED (AGPLv3 or COMMERCIAL).

import logging
from typing import Dict, Optional, Tuple

from setstr.model import FieldMeta, Filter, TypeMetadata, default_import_name, null_filter
from setstr.tags import tag_name

logger = logging.getLogger("setstr.walker")

# Field types that are recognised but never generated for.
SKIPPED = object()


def _ident_type(node):
    if node["type_args"]:
        return None
    return node["name"]


def _selector_type(node):
    if node["type_args"]:
        return None
    return "%s.%s" % (node["package"], node["name"])


def _pointer_type(node):
    elem = node["elem"]
    if elem["type"] != "selector":
        return None
    ref = _selector_type(elem)
    return "*" + ref if ref else None


def _skipped_type(node):
    return SKIPPED


FIELD_TYPE_HANDLERS = {
    "ident": _ident_type,
    "selector": _selector_type,
    "pointer": _pointer_type,
    "array": _skipped_type,
    "slice": _skipped_type,
}


def field_type_string(node):
    """
    Renders a field's declared type the way generated code spells it.

    Returns SKIPPED for array and slice types, None for shapes that are not
    supported at all.
    """
    handler = FIELD_TYPE_HANDLERS.get(node["type"])
    if handler is None:
        return None
    return handler(node)


class DeclarationWalker:
    def __init__(self, file_name: str, filter: Optional[Filter] = None):
        self.file_name = file_name
        self.filter = filter or null_filter

    def walk(self, tree) -> Tuple[Dict[str, str], TypeMetadata]:
        """
        Collects the import table and tagged struct fields of one file.

        Returns (imports, metadata): imports maps each alias (or the default
        name for unaliased imports) to its quoted path; metadata maps struct
        type names to their FieldMeta in declaration order. Types without a
        single qualifying field do not appear.
        """
        imports = {}
        for imp in tree["imports"]:
            alias = imp["alias"] or default_import_name(imp["path"])
            imports[alias] = imp["path"]

        metadata = {}
        for spec in tree["types"]:
            if spec["decl_type"]["type"] != "struct":
                continue
            if spec["type_params"]:
                logger.warning("%s:%s: skipping generic type %s",
                               self.file_name, spec.get("line", 0), spec["name"])
                continue
            fields = self.walk_struct(spec["name"], spec["decl_type"])
            if fields:
                metadata[spec["name"]] = fields
        return imports, metadata

    def walk_struct(self, type_name, struct):
        fields = []
        for field in struct["fields"]:
            tag = tag_name(field["tag"])
            if not tag or not field["names"]:
                continue
            # only the first of `A, B T` is generated for
            name = field["names"][0]
            field_type = field_type_string(field["field_type"])
            if field_type is SKIPPED:
                continue
            if field_type is None:
                logger.warning("%s:%s: %s.%s: unsupported field type (%s)",
                               self.file_name, field.get("line", 0), type_name, name,
                               field["field_type"]["type"])
                continue
            if self.filter(self.file_name, type_name, name, field_type):
                fields.append(FieldMeta(name, field_type, tag))
        return fields
