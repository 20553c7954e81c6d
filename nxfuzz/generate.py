"""Generators that produce one syscall argument each.

Every generator takes a :class:`ChildContext`, produces a value for the
argument at ``ctx.current_arg``, records the argument's size in the context
and returns the value.
"""

from __future__ import annotations

import mmap
import os
import random
import socket
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Any, Sequence

INT_MAX = 2**31 - 1

_SIZEOF_INT32 = 4
_SIZEOF_INT64 = 8

FREEBSD = "freebsd"
DARWIN = "darwin"
_PLATFORMS = (FREEBSD, DARWIN)

STATFS_SIZE = {FREEBSD: 2344, DARWIN: 2168}
RUSAGE_SIZE = 144
DEV_SIZE = {FREEBSD: 8, DARWIN: 4}

OPEN_FLAG_VALUES: tuple[int, ...] = (
    os.O_RDONLY,
    os.O_WRONLY,
    os.O_RDWR,
    getattr(os, "O_NONBLOCK", 0x0004),
    getattr(os, "O_APPEND", 0x0008),
    getattr(os, "O_CREAT", 0x0200),
    getattr(os, "O_TRUNC", 0x0400),
    getattr(os, "O_EXCL", 0x0800),
)

MODE_VALUES: tuple[int, ...] = (
    0o001, 0o002, 0o003, 0o004, 0o005, 0o006, 0o007,
    0o010, 0o020, 0o030, 0o040, 0o050, 0o060, 0o070,
    100, 200, 300, 400, 500, 600, 700,
)

MNT_WAIT = 1
MNT_NOWAIT = 2
STAT_FLAG_VALUES: tuple[int, ...] = (MNT_NOWAIT, MNT_WAIT)

WAIT_OPTION_VALUES: tuple[int, ...] = (
    getattr(os, "WUNTRACED", 2),
    getattr(os, "WNOHANG", 1),
)

_SEEK_DATA = 3
_SEEK_HOLE = 4
WHENCE_VALUES: dict[str, tuple[int, ...]] = {
    FREEBSD: (os.SEEK_SET, os.SEEK_CUR, os.SEEK_END, _SEEK_HOLE, _SEEK_DATA),
    DARWIN: (os.SEEK_SET, os.SEEK_CUR, os.SEEK_END),
}

_MNT_RDONLY = 0x01
_MNT_SYNCHRONOUS = 0x02
_MNT_NOEXEC = 0x04
_MNT_NOSUID = 0x08
_MNT_NODEV = 0x10
_MNT_UNION = 0x20
_MNT_CPROTECT = 0x80
MOUNT_FLAG_VALUES: dict[str, tuple[int, ...]] = {
    DARWIN: (
        _MNT_RDONLY, _MNT_NOEXEC, _MNT_NOSUID, _MNT_NODEV,
        _MNT_UNION, _MNT_SYNCHRONOUS, _MNT_CPROTECT,
    ),
    FREEBSD: (_MNT_RDONLY, _MNT_NOEXEC, _MNT_NOSUID, _MNT_UNION, _MNT_SYNCHRONOUS),
}

REQUEST_VALUES: dict[str, tuple[int, ...]] = {
    # PT_TRACE_ME, PT_DENY_ATTACH, PT_CONTINUE, PT_STEP,
    # PT_KILL, PT_ATTACH, PT_ATTACHEXC, PT_DETACH
    DARWIN: (0, 31, 7, 9, 8, 10, 14, 11),
    # PT_TRACE_ME .. PT_VM_ENTRY in the order the generator lists them.
    FREEBSD: (
        0, 1, 4, 12,
        7, 9, 8, 10,
        11, 33, 34, 35,
        36, 37, 38, 13,
        14, 15, 17, 16,
        18, 19, 20, 21,
        22, 23, 40, 41,
    ),
}

RECV_FLAG_VALUES: tuple[int, ...] = (
    getattr(socket, "MSG_OOB", 0x1),
    getattr(socket, "MSG_PEEK", 0x2),
    getattr(socket, "MSG_WAITALL", 0x40),
)

_BUF_MAX = 1023


class GenerationError(Exception):
    """Raised when an argument value cannot be produced."""


@dataclass
class ResourcePool:
    """Resources that generators hand out as syscall arguments."""

    descriptors: list[int] = field(default_factory=list)
    sockets: list[int] = field(default_factory=list)
    file_paths: list[str] = field(default_factory=list)
    dir_paths: list[str] = field(default_factory=list)


def _default_platform() -> str:
    return DARWIN if sys.platform == "darwin" else FREEBSD


@dataclass
class ChildContext:
    """State of one fuzzing child while it builds a syscall's arguments."""

    pool: ResourcePool = field(default_factory=ResourcePool)
    platform: str = field(default_factory=_default_platform)
    rng: Any = field(default_factory=random.SystemRandom)
    current_arg: int = 0
    arg_sizes: list[int] = field(default_factory=list)
    spawned: list[subprocess.Popen] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.platform not in _PLATFORMS:
            raise ValueError(f"unsupported platform: {self.platform!r}")

    def record_size(self, size: int) -> None:
        """Store the size of the argument at ``current_arg``."""
        missing = self.current_arg + 1 - len(self.arg_sizes)
        if missing > 0:
            self.arg_sizes.extend([0] * missing)
        self.arg_sizes[self.current_arg] = size

    def last_size(self) -> int:
        """Return the size of the previous argument (the first one for argument 0)."""
        index = self.current_arg - 1 if self.current_arg > 0 else 0
        return self.arg_sizes[index] if index < len(self.arg_sizes) else 0

    def rand_range(self, upper: int) -> int:
        """Return a random integer between 0 and ``upper`` inclusive."""
        if upper < 0:
            raise ValueError(f"upper bound must not be negative: {upper}")
        return self.rng.randint(0, upper)

    def __enter__(self) -> "ChildContext":
        return self

    def __exit__(self, *exc: object) -> None:
        while self.spawned:
            proc = self.spawned.pop()
            if proc.poll() is None:
                proc.kill()
            proc.wait()


def _choose(ctx: ChildContext, values: Sequence[int]) -> int:
    return values[ctx.rand_range(len(values) - 1)]


def _pick(ctx: ChildContext, items: Sequence[Any], what: str) -> Any:
    if not items:
        raise GenerationError(f"Can't get {what}")
    return items[ctx.rand_range(len(items) - 1)]


def generate_fd(ctx: ChildContext) -> int:
    """Return a file descriptor taken from the pool."""
    desc = _pick(ctx, ctx.pool.descriptors, "file descriptor")
    ctx.record_size(_SIZEOF_INT32)
    return desc


def generate_socket(ctx: ChildContext) -> int:
    """Return a socket descriptor taken from the pool."""
    sock = _pick(ctx, ctx.pool.sockets, "socket")
    ctx.record_size(_SIZEOF_INT32)
    return sock


def generate_buf(ctx: ChildContext) -> mmap.mmap:
    """Return an anonymous private mapping of 1 to 1024 bytes with random protection."""
    nbytes = ctx.rand_range(_BUF_MAX) + 1
    choice = ctx.rand_range(2)
    try:
        if hasattr(mmap, "PROT_READ"):
            prot = (
                mmap.PROT_READ | mmap.PROT_WRITE,
                mmap.PROT_READ,
                mmap.PROT_WRITE,
            )[choice]
            buf = mmap.mmap(
                -1, nbytes, flags=mmap.MAP_PRIVATE | mmap.MAP_ANONYMOUS, prot=prot
            )
        else:
            buf = mmap.mmap(-1, nbytes)
    except OSError as exc:
        raise GenerationError(f"mmap: {exc.strerror or exc}") from exc
    ctx.record_size(nbytes)
    return buf


def generate_length(ctx: ChildContext) -> int:
    """Return the size of the previous argument."""
    length = ctx.last_size()
    ctx.record_size(_SIZEOF_INT64)
    return length


def generate_path(ctx: ChildContext) -> str:
    """Return a file path taken from the pool."""
    path = _pick(ctx, ctx.pool.file_paths, "file path")
    ctx.record_size(len(path))
    return path


def generate_open_flag(ctx: ChildContext) -> int:
    """Return one open(2) flag."""
    flag = OPEN_FLAG_VALUES[ctx.rand_range(7)]
    ctx.record_size(_SIZEOF_INT64)
    return flag


def generate_mode(ctx: ChildContext) -> int:
    """Return one file mode value."""
    mode = MODE_VALUES[ctx.rand_range(20)]
    ctx.record_size(_SIZEOF_INT64)
    return mode


def generate_fs_stat(ctx: ChildContext) -> bytearray:
    """Return a zeroed buffer the size of a statfs structure."""
    size = STATFS_SIZE[ctx.platform]
    ctx.record_size(size)
    return bytearray(size)


def generate_fs_stat_flag(ctx: ChildContext) -> int:
    """Return MNT_NOWAIT or MNT_WAIT."""
    flag = STAT_FLAG_VALUES[ctx.rand_range(1)]
    ctx.record_size(_SIZEOF_INT64)
    return flag


def generate_pid(ctx: ChildContext) -> int:
    """Start a process that sleeps until it is killed and return its pid."""
    try:
        proc = subprocess.Popen(
            [sys.executable, "-c", "import time\nwhile True:\n    time.sleep(30)"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        raise GenerationError(f"Can't create pid: {exc.strerror or exc}") from exc
    ctx.spawned.append(proc)
    ctx.record_size(_SIZEOF_INT64)
    return proc.pid


def generate_int(ctx: ChildContext) -> int:
    """Return a random integer between 0 and INT_MAX."""
    number = ctx.rand_range(INT_MAX)
    ctx.record_size(_SIZEOF_INT64)
    return number


def generate_rusage(ctx: ChildContext) -> bytearray:
    """Return a zeroed buffer the size of an rusage structure."""
    ctx.record_size(RUSAGE_SIZE)
    return bytearray(RUSAGE_SIZE)


def generate_wait_option(ctx: ChildContext) -> int:
    """Return WUNTRACED or WNOHANG."""
    option = WAIT_OPTION_VALUES[ctx.rand_range(1)]
    ctx.record_size(_SIZEOF_INT64)
    return option


def generate_whence(ctx: ChildContext) -> int:
    """Return one lseek(2) whence value supported by the platform."""
    whence = _choose(ctx, WHENCE_VALUES[ctx.platform])
    ctx.record_size(_SIZEOF_INT64)
    return whence


def generate_offset(ctx: ChildContext) -> int:
    """Return a random offset between 0 and INT_MAX."""
    offset = ctx.rand_range(INT_MAX)
    ctx.record_size(_SIZEOF_INT64)
    return offset


def generate_mountpath(ctx: ChildContext) -> None:
    """Return a null mount path; the argument is recorded with size 0."""
    ctx.record_size(0)
    return None


def generate_mount_type(ctx: ChildContext) -> None:
    """Return a null mount type; the argument is recorded with size 0."""
    ctx.record_size(0)
    return None


def generate_dirpath(ctx: ChildContext) -> str:
    """Return a directory path taken from the pool."""
    path = _pick(ctx, ctx.pool.dir_paths, "directory path")
    ctx.record_size(len(path))
    return path


def generate_mount_flags(ctx: ChildContext) -> int:
    """Return one mount flag supported by the platform."""
    flag = _choose(ctx, MOUNT_FLAG_VALUES[ctx.platform])
    ctx.record_size(_SIZEOF_INT32)
    return flag


def generate_unmount_flags(ctx: ChildContext) -> int:
    """Return one unmount flag supported by the platform."""
    flag = _choose(ctx, MOUNT_FLAG_VALUES[ctx.platform])
    ctx.record_size(_SIZEOF_INT32)
    return flag


def generate_request(ctx: ChildContext) -> int:
    """Return one ptrace(2) request supported by the platform."""
    request = _choose(ctx, REQUEST_VALUES[ctx.platform])
    ctx.record_size(_SIZEOF_INT32)
    return request


def generate_recv_flags(ctx: ChildContext) -> int:
    """Return MSG_OOB, MSG_PEEK or MSG_WAITALL."""
    flag = RECV_FLAG_VALUES[ctx.rand_range(2)]
    ctx.record_size(_SIZEOF_INT64)
    return flag


def generate_dev(ctx: ChildContext) -> int:
    """Return a device number."""
    ctx.record_size(DEV_SIZE[ctx.platform])
    return 0