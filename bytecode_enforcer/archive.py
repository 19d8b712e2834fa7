"""Archive scanner — checks every class entry of a jar against a bytecode level."""

from __future__ import annotations

import zipfile
import zlib

import structlog

from bytecode_enforcer.classfile import JAVA_7, java_release_name, read_class_header
from bytecode_enforcer.exceptions import ArchiveReadError
from bytecode_enforcer.models import DependencyReference

log = structlog.get_logger("bytecode_enforcer.archive")

CLASS_SUFFIX = ".class"


class ArchiveScanner:
    """Decide whether a dependency archive contains classes above *supported_level*."""

    def __init__(self, supported_level: int = JAVA_7) -> None:
        self.supported_level = supported_level

    def exceeds_level(self, reference: DependencyReference) -> bool:
        """Scan the archive of *reference*; stop at the first offending class.

        Entries with a bad magic number are logged and skipped.

        Raises:
            ArchiveReadError: the archive is missing, not a zip, truncated,
                corrupt, encrypted or uses an unsupported compression method.
        """
        try:
            with zipfile.ZipFile(reference.path) as archive:
                for entry in archive.infolist():
                    if entry.is_dir() or not entry.filename.endswith(CLASS_SUFFIX):
                        continue
                    with archive.open(entry) as stream:
                        header = read_class_header(stream)
                    if not header.is_valid:
                        log.debug(
                            "archive.invalid_class",
                            dependency=str(reference),
                            entry=entry.filename,
                            magic=f"0x{header.magic:08X}",
                        )
                        continue
                    if header.major > self.supported_level:
                        log.debug(
                            "archive.level_exceeded",
                            dependency=str(reference),
                            entry=entry.filename,
                            major=header.major,
                            release=java_release_name(header.major),
                        )
                        return True
        except (
            OSError,
            EOFError,
            zipfile.BadZipFile,
            zlib.error,
            NotImplementedError,  # unsupported compression method
            RuntimeError,  # encrypted entry
        ) as exc:
            raise ArchiveReadError(str(reference.path), exc) from exc
        return False
