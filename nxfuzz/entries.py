"""Syscall entries describing how to build the arguments of each fuzzed syscall."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable

from nxfuzz.argtypes import ArgContext, ArgType, get_arg_context
from nxfuzz.generate import (
    ChildContext,
    generate_dev,
    generate_fd,
    generate_fs_stat,
    generate_fs_stat_flag,
    generate_length,
    generate_mode,
    generate_offset,
    generate_path,
    generate_whence,
)

Generator = Callable[[ChildContext], Any]

MAX_ARGS = 7

# FreeBSD syscall numbers; creat has no syscall of its own and is listed as 0.
SYS_CREAT = 0
SYS_CLOSE = 6
SYS_LINK = 9
SYS_CHDIR = 12
SYS_FCHDIR = 13
SYS_MKNOD = 14
SYS_CHMOD = 15
SYS_GETFSSTAT = 395
SYS_LSEEK = 478


class Status(enum.Enum):
    """Whether an entry takes part in fuzzing."""

    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class SyscallEntry:
    """How to fuzz one syscall: its number, its argument types and their generators."""

    name: str
    number: int
    arg_types: tuple[ArgType, ...]
    generators: tuple[Generator, ...]
    status: Status = Status.ON
    requires_root: bool = False
    need_alarm: bool = False

    def __post_init__(self) -> None:
        if len(self.arg_types) != len(self.generators):
            raise ValueError(
                f"{self.name}: {len(self.arg_types)} argument types but "
                f"{len(self.generators)} generators"
            )
        if len(self.arg_types) > MAX_ARGS:
            raise ValueError(f"{self.name}: more than {MAX_ARGS} arguments")

    @property
    def number_of_args(self) -> int:
        """Number of arguments the syscall takes."""
        return len(self.arg_types)

    @property
    def arg_contexts(self) -> tuple[ArgContext, ...]:
        """Static metadata for each argument, in order."""
        return tuple(get_arg_context(arg_type) for arg_type in self.arg_types)

    def generate_args(self, ctx: ChildContext) -> list[Any]:
        """Produce one value per argument, recording each argument's size in ``ctx``."""
        ctx.arg_sizes = []
        values = []
        for index, generator in enumerate(self.generators):
            ctx.current_arg = index
            values.append(generator(ctx))
        return values


entry_chdir = SyscallEntry(
    name="chdir",
    number=SYS_CHDIR,
    arg_types=(ArgType.FILE_PATH,),
    generators=(generate_path,),
)

entry_chmod = SyscallEntry(
    name="chmod",
    number=SYS_CHMOD,
    arg_types=(ArgType.FILE_PATH, ArgType.MODE),
    generators=(generate_path, generate_mode),
)

entry_close = SyscallEntry(
    name="close",
    number=SYS_CLOSE,
    arg_types=(ArgType.FILE_DESC,),
    generators=(generate_fd,),
)

entry_creat = SyscallEntry(
    name="creat",
    number=SYS_CREAT,
    arg_types=(ArgType.FILE_PATH, ArgType.MODE),
    generators=(generate_path, generate_mode),
)

entry_fchdir = SyscallEntry(
    name="fchdir",
    number=SYS_FCHDIR,
    arg_types=(ArgType.FILE_DESC,),
    generators=(generate_fd,),
)

entry_getfsstat = SyscallEntry(
    name="getfsstat",
    number=SYS_GETFSSTAT,
    arg_types=(ArgType.STAT_FS, ArgType.SIZE, ArgType.STAT_FLAG),
    generators=(generate_fs_stat, generate_length, generate_fs_stat_flag),
)

entry_link = SyscallEntry(
    name="link",
    number=SYS_LINK,
    arg_types=(ArgType.FILE_PATH, ArgType.FILE_PATH),
    generators=(generate_path, generate_path),
)

entry_lseek = SyscallEntry(
    name="lseek",
    number=SYS_LSEEK,
    arg_types=(ArgType.FILE_DESC, ArgType.OFFSET, ArgType.WHENCE),
    generators=(generate_fd, generate_offset, generate_whence),
)

entry_mknod = SyscallEntry(
    name="mknod",
    number=SYS_MKNOD,
    arg_types=(ArgType.FILE_PATH, ArgType.MODE, ArgType.DEV),
    generators=(generate_path, generate_mode, generate_dev),
)

ENTRIES: tuple[SyscallEntry, ...] = (
    entry_close,
    entry_creat,
    entry_link,
    entry_chdir,
    entry_fchdir,
    entry_mknod,
    entry_chmod,
    entry_getfsstat,
    entry_lseek,
)