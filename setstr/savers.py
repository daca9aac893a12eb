"""
Output sinks for generated code.

A saver is any callable ``(file_name, package_name, imports, metadata)``.
The pipeline only calls it when there is something to write.
"""

import io
import logging
import os
import sys
from typing import Dict, List, Optional, TextIO, Tuple

from setstr.codegen import write_setters
from setstr.config import settings
from setstr.errors import SaveError
from setstr.model import ImportEntry, TypeMetadata

logger = logging.getLogger("setstr.savers")


def invoking_command() -> str:
    return " ".join(sys.argv)


def output_path(file_name: str, suffix: Optional[str] = None) -> str:
    """foo/bar.go -> foo/bar_setters.go"""
    if suffix is None:
        suffix = settings.SUFFIX
    root, ext = os.path.splitext(file_name)
    return root + suffix + (ext or ".go")


class FileSaver:
    """Writes generated code next to the source file."""

    def __init__(self, suffix: Optional[str] = None, command: Optional[str] = None):
        self.suffix = settings.SUFFIX if suffix is None else suffix
        self.command = command

    def __call__(self, file_name: str, package_name: str,
                 imports: List[ImportEntry], metadata: TypeMetadata):
        target = output_path(file_name, self.suffix)
        command = self.command if self.command is not None else invoking_command()

        # renamed into place only once complete
        tmp_path = target + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as w:
                write_setters(w, package_name, imports, metadata, command)
            os.replace(tmp_path, target)
        except BaseException as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            if isinstance(e, OSError):
                raise SaveError(f"cannot write {target}: {e}") from e
            raise

        logger.info("wrote %s", target)
        return target


class StreamSaver:
    """Writes generated code to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None, command: Optional[str] = None):
        self.stream = stream
        self.command = command

    def __call__(self, file_name: str, package_name: str,
                 imports: List[ImportEntry], metadata: TypeMetadata):
        w = self.stream or sys.stdout
        command = self.command if self.command is not None else invoking_command()
        write_setters(w, package_name, imports, metadata, command, source=file_name)


class MemorySaver:
    """Keeps every call and the rendered text, keyed by source file."""

    def __init__(self, command: str = ""):
        self.command = command
        self.calls: List[Tuple[str, str, List[ImportEntry], TypeMetadata]] = []
        self.outputs: Dict[str, str] = {}

    def __call__(self, file_name: str, package_name: str,
                 imports: List[ImportEntry], metadata: TypeMetadata):
        self.calls.append((file_name, package_name, list(imports), metadata))
        buf = io.StringIO()
        write_setters(buf, package_name, imports, metadata, self.command)
        self.outputs[file_name] = buf.getvalue()
