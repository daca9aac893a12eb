# Copyright (c) 2026 Mohamad Al-Zawahreh (dba Sovereign Systems).
#
# This file is part of setstr.
#
# LICENSE: DUAL-LICENSED (AGPLv3 or COMMERCIAL).

import logging
import os
from collections import OrderedDict
from typing import Dict, List, Optional

from setstr.checker import check_package
from setstr.config import settings
from setstr.errors import SetstrError
from setstr.go_parser import GoParser
from setstr.imports import resolve_imports
from setstr.model import Filter, Saver, TypeMetadata
from setstr.savers import FileSaver
from setstr.walker import DeclarationWalker

logger = logging.getLogger("setstr.pipeline")


def _read(file_name):
    try:
        with open(file_name, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise SetstrError(f"cannot read {file_name}: {e}") from e
    except UnicodeDecodeError as e:
        raise SetstrError(f"{file_name}: invalid UTF-8 at byte {e.start}") from e


def _report(diagnostics):
    for file_name in diagnostics:
        for message in diagnostics[file_name]:
            logger.warning("type check: %s", message)


def _generate(tree, filter, saver) -> TypeMetadata:
    file_name = tree["file"]
    imports, metadata = DeclarationWalker(file_name, filter).walk(tree)
    if not metadata:
        logger.debug("%s: no tagged fields", file_name)
        return metadata

    logger.debug("%s: imports %s", file_name, imports)
    resolved = resolve_imports(imports, metadata)
    saver(file_name, tree["package"], resolved, metadata)
    return metadata


def parse_file(file_name: str, filter: Optional[Filter] = None,
               saver: Optional[Saver] = None) -> TypeMetadata:
    """
    Generates setters for one Go file.

    Returns the collected metadata. The saver is only called when at least
    one field qualified. Syntax errors raise GoSyntaxError before anything is
    saved.
    """
    saver = saver or FileSaver()
    tree = GoParser().parse(_read(file_name), file_name)
    _report(check_package([tree]))
    return _generate(tree, filter, saver)


def go_files(directory: str, suffix: Optional[str] = None) -> List[str]:
    """Go sources in ``directory``, minus previously generated files."""
    if suffix is None:
        suffix = settings.SUFFIX
    generated = suffix + ".go"
    names = sorted(
        name for name in os.listdir(directory)
        if name.endswith(".go") and not (suffix and name.endswith(generated))
    )
    return [os.path.join(directory, name) for name in names]


def parse_dir(directory: str, filter: Optional[Filter] = None,
              saver: Optional[Saver] = None,
              suffix: Optional[str] = None) -> Dict[str, TypeMetadata]:
    """
    Generates setters for every Go file in ``directory`` (not recursive).

    All files are parsed before anything is saved, so a syntax error in any
    of them produces no output at all. Files are type checked together with
    the other files of their package. Returns metadata per file that produced
    output.
    """
    saver = saver or FileSaver(suffix=suffix)
    parser = GoParser()

    packages = OrderedDict()
    for file_name in go_files(directory, suffix):
        tree = parser.parse(_read(file_name), file_name)
        packages.setdefault(tree["package"], []).append(tree)

    results = {}
    for trees in packages.values():
        _report(check_package(trees))
        for tree in trees:
            metadata = _generate(tree, filter, saver)
            if metadata:
                results[tree["file"]] = metadata
    return results


def parse_path(path: str, filter: Optional[Filter] = None,
               saver: Optional[Saver] = None, suffix: Optional[str] = None):
    if os.path.isdir(path):
        return parse_dir(path, filter, saver, suffix)
    if not os.path.exists(path):
        raise SetstrError(f"no such file or directory: {path}")
    metadata = parse_file(path, filter, saver or FileSaver(suffix=suffix))
    return {path: metadata} if metadata else {}
