"""Read the entry point of an ELF executable."""

from __future__ import annotations

import os
import struct

_ELF_MAGIC = b"\x7fELF"
_AR_MAGIC = b"!<arch>\n"
_ENTRY_OFFSET = 24

_CLASS_32 = 1
_CLASS_64 = 2
_DATA_LSB = 1
_DATA_MSB = 2


class ElfError(Exception):
    """Raised when a file cannot be read as an ELF executable."""


def read_entry_point(path: str | os.PathLike[str]) -> int:
    """Return the entry address recorded in the ELF header at ``path``."""
    try:
        with open(path, "rb") as handle:
            header = handle.read(64)
    except OSError as exc:
        raise ElfError(f"open: {exc.strerror or exc}") from exc

    if header.startswith(_AR_MAGIC):
        raise ElfError("This is an archive not an executable.")
    if not header.startswith(_ELF_MAGIC):
        raise ElfError("Not a ELF file.")
    if len(header) < 6:
        raise ElfError("Can't get elf header: file is truncated")

    elf_class, data = header[4], header[5]
    if data == _DATA_LSB:
        order = "<"
    elif data == _DATA_MSB:
        order = ">"
    else:
        raise ElfError(f"Can't get elf header: unknown data encoding {data}")

    if elf_class == _CLASS_32:
        fmt = order + "I"
    elif elf_class == _CLASS_64:
        fmt = order + "Q"
    else:
        raise ElfError(f"Can't handle this file type: class {elf_class}")

    end = _ENTRY_OFFSET + struct.calcsize(fmt)
    if len(header) < end:
        raise ElfError("Can't get elf header: file is truncated")
    (entry,) = struct.unpack_from(fmt, header, _ENTRY_OFFSET)
    return entry