"""
Best-effort type resolution over parsed Go files.

This is not a type checker in the compiler sense. It only reports type names
used in declarations that cannot be resolved against the package's own type
declarations, the predeclared types and the file's imports. Callers log the
diagnostics and carry on.
"""

from typing import Dict, List

from setstr.model import default_import_name

PREDECLARED_TYPES = frozenset({
    "any", "bool", "byte", "comparable", "complex64", "complex128", "error",
    "float32", "float64", "int", "int8", "int16", "int32", "int64", "rune",
    "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
})


def file_scope(tree) -> Dict[str, str]:
    """Maps every name a file's imports bind to the quoted import path."""
    scope = {}
    for imp in tree["imports"]:
        alias = imp["alias"]
        if alias in (".", "_"):
            continue
        scope[alias or default_import_name(imp["path"])] = imp["path"]
    return scope


def check_package(trees) -> Dict[str, List[str]]:
    """
    Resolves type references across all files of one package.

    Returns diagnostics keyed by file name; files without problems are absent.
    """
    declared = set()
    for tree in trees:
        for spec in tree["types"]:
            declared.add(spec["name"])

    diagnostics = {}
    for tree in trees:
        imported = file_scope(tree)
        # names from a dot import are unknowable without loading the package
        dotted = any(imp["alias"] == "." for imp in tree["imports"])
        errors = []
        for spec in tree["types"]:
            local = declared | set(spec["type_params"])
            _check_type(spec["decl_type"], local, imported, errors, dotted)
        if errors:
            diagnostics[tree["file"]] = errors
    return diagnostics


def _check_type(node, declared, imported, errors, dotted=False):
    kind = node["type"]
    if kind == "ident":
        if not dotted and node["name"] not in declared and node["name"] not in PREDECLARED_TYPES:
            errors.append(_where(node) + "undeclared name: " + node["name"])
    elif kind == "selector":
        if node["package"] not in imported:
            errors.append(_where(node) + "undeclared name: " + node["package"])
    elif kind == "struct":
        for field in node["fields"]:
            _check_type(field["field_type"], declared, imported, errors, dotted)
        return
    elif kind == "map":
        _check_type(node["key"], declared, imported, errors, dotted)

    if "elem" in node:
        _check_type(node["elem"], declared, imported, errors, dotted)
    for arg in node.get("type_args", ()):
        _check_type(arg, declared, imported, errors, dotted)


def _where(node):
    return "%s:%s:%s: " % (node.get("file"), node.get("line", 0), node.get("column", 0))
