"""Class-file header reader — magic, minor and major version (8 bytes)."""

from __future__ import annotations

import struct
from typing import BinaryIO, NamedTuple

JAVA_CLASS_MAGIC = 0xCAFEBABE

JDK_1_1 = 45  # 0x2D
JDK_1_2 = 46  # 0x2E
JDK_1_3 = 47  # 0x2F
JDK_1_4 = 48  # 0x30
JAVA_5 = 49  # 0x31
JAVA_6 = 50  # 0x32
JAVA_7 = 51  # 0x33
JAVA_8 = 52  # 0x34
JAVA_9 = 53  # 0x35

_HEADER = struct.Struct(">IHH")


class ClassFileHeader(NamedTuple):
    magic: int
    minor: int
    major: int

    @property
    def is_valid(self) -> bool:
        return self.magic == JAVA_CLASS_MAGIC


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    # Entry streams may return short reads before EOF.
    buf = bytearray()
    while len(buf) < size:
        chunk = stream.read(size - len(buf))
        if not chunk:
            raise EOFError(f"expected {size} bytes of class header, got {len(buf)}")
        buf.extend(chunk)
    return bytes(buf)


def read_class_header(stream: BinaryIO) -> ClassFileHeader:
    """Read the 8-byte class-file prefix from *stream*.

    Raises:
        EOFError: fewer than 8 bytes are available.
    """
    magic, minor, major = _HEADER.unpack(_read_exactly(stream, _HEADER.size))
    return ClassFileHeader(magic, minor, major)


def java_release_name(major: int) -> str:
    """Human-readable runtime name for a class-file major version."""
    if major < JDK_1_1:
        return f"unknown ({major})"
    if major < JAVA_5:
        return f"JDK 1.{major - 44}"
    return f"Java {major - 44}"
