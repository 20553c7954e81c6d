"""Syscall argument types and the metadata attached to each of them."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ArgType(enum.IntEnum):
    """Kinds of argument a syscall entry can ask the generator for."""

    FILE_DESC = 0
    VOID_BUF = 1
    SIZE = 2
    FILE_PATH = 3
    OPEN_FLAG = 4
    MODE = 5
    STAT_FS = 6
    STAT_FLAG = 7
    INT = 8
    RUSAGE = 9
    PID = 10
    WAIT_OPTION = 11
    SOCKET = 12
    WHENCE = 13
    OFFSET = 14
    MOUNT_TYPE = 15
    DIR_PATH = 16
    MOUNT_FLAG = 17
    UNMOUNT_FLAG = 18
    RECV_FLAG = 19
    REQUEST = 20
    MOUNT_PATH = 21
    DEV = 22


class LogType(enum.Enum):
    """How an argument value is rendered when a test case is logged."""

    NUMBER = "number"
    POINTER = "pointer"
    PATH = "path"


@dataclass(frozen=True)
class ArgContext:
    """Static description of one argument type."""

    name: str
    type: ArgType
    should_free: bool
    log_type: LogType


def _ctx(name: str, arg_type: ArgType, should_free: bool, log_type: LogType) -> ArgContext:
    return ArgContext(name=name, type=arg_type, should_free=should_free, log_type=log_type)


_CONTEXTS: dict[ArgType, ArgContext] = {
    ctx.type: ctx
    for ctx in (
        _ctx("FILE_DESC", ArgType.FILE_DESC, False, LogType.NUMBER),
        _ctx("VOID_BUF", ArgType.VOID_BUF, True, LogType.POINTER),
        _ctx("SIZE", ArgType.SIZE, True, LogType.NUMBER),
        _ctx("FILE_PATH", ArgType.FILE_PATH, False, LogType.PATH),
        _ctx("OPEN_FLAG", ArgType.OPEN_FLAG, True, LogType.NUMBER),
        _ctx("MODE", ArgType.MODE, True, LogType.NUMBER),
        _ctx("STAT_FS", ArgType.STAT_FS, True, LogType.POINTER),
        _ctx("STAT_FLAG", ArgType.STAT_FLAG, True, LogType.NUMBER),
        _ctx("INT", ArgType.INT, True, LogType.NUMBER),
        _ctx("RUSAGE", ArgType.RUSAGE, True, LogType.POINTER),
        _ctx("PID", ArgType.PID, True, LogType.POINTER),
        _ctx("WAIT_OPTION", ArgType.WAIT_OPTION, True, LogType.NUMBER),
        _ctx("SOCKET", ArgType.SOCKET, True, LogType.NUMBER),
        _ctx("WHENCE", ArgType.WHENCE, True, LogType.NUMBER),
        _ctx("OFFSET", ArgType.OFFSET, True, LogType.NUMBER),
        _ctx("MOUNT_TYPE", ArgType.MOUNT_TYPE, True, LogType.POINTER),
        _ctx("DIR_PATH", ArgType.DIR_PATH, False, LogType.POINTER),
        _ctx("MOUNT_FLAG", ArgType.MOUNT_FLAG, True, LogType.NUMBER),
        _ctx("UNMOUNT_FLAG", ArgType.UNMOUNT_FLAG, True, LogType.NUMBER),
        _ctx("RECV_FLAG", ArgType.RECV_FLAG, True, LogType.NUMBER),
        _ctx("REQUEST", ArgType.REQUEST, True, LogType.NUMBER),
        _ctx("MOUNT_PATH", ArgType.MOUNT_PATH, False, LogType.PATH),
        _ctx("dev", ArgType.DEV, True, LogType.NUMBER),
    )
}


def get_arg_context(arg_type: ArgType | int) -> ArgContext:
    """Return the context for an argument type.

    Raises ValueError for a value that is not a listed argument type.
    """
    try:
        key = ArgType(arg_type)
    except ValueError:
        raise ValueError(f"unlisted arg type: {arg_type!r}") from None
    return _CONTEXTS[key]