"""The system call table: every syscall entry the fuzzer knows about."""

from __future__ import annotations

from nxfuzz.argtypes import ArgType
from nxfuzz.entries import (
    SyscallEntry,
    entry_chdir,
    entry_chmod,
    entry_close,
    entry_creat,
    entry_fchdir,
    entry_getfsstat,
    entry_link,
    entry_lseek,
    entry_mknod,
)
from nxfuzz.generate import (
    generate_buf,
    generate_dirpath,
    generate_fd,
    generate_int,
    generate_length,
    generate_mode,
    generate_mount_flags,
    generate_mount_type,
    generate_mountpath,
    generate_open_flag,
    generate_path,
    generate_pid,
    generate_recv_flags,
    generate_request,
    generate_rusage,
    generate_socket,
    generate_unmount_flags,
    generate_wait_option,
)

# FreeBSD syscall numbers.
SYS_READ = 3
SYS_WRITE = 4
SYS_OPEN = 5
SYS_WAIT4 = 7
SYS_UNLINK = 10
SYS_MOUNT = 21
SYS_UNMOUNT = 22
SYS_SETUID = 23
SYS_PTRACE = 26
SYS_RECVMSG = 27


entry_mount = SyscallEntry(
    name="mount",
    number=SYS_MOUNT,
    arg_types=(ArgType.MOUNT_TYPE, ArgType.MOUNT_PATH, ArgType.MOUNT_FLAG, ArgType.VOID_BUF),
    generators=(generate_mount_type, generate_mountpath, generate_mount_flags, generate_buf),
    requires_root=True,
)

entry_open = SyscallEntry(
    name="open",
    number=SYS_OPEN,
    arg_types=(ArgType.FILE_PATH, ArgType.OPEN_FLAG, ArgType.MODE),
    generators=(generate_path, generate_open_flag, generate_mode),
)

entry_ptrace = SyscallEntry(
    name="ptrace",
    number=SYS_PTRACE,
    arg_types=(ArgType.REQUEST, ArgType.PID, ArgType.VOID_BUF, ArgType.INT),
    generators=(generate_request, generate_pid, generate_buf, generate_int),
    requires_root=True,
)

entry_read = SyscallEntry(
    name="read",
    number=SYS_READ,
    arg_types=(ArgType.FILE_DESC, ArgType.VOID_BUF, ArgType.SIZE),
    generators=(generate_fd, generate_buf, generate_length),
    need_alarm=True,
)

entry_recvmsg = SyscallEntry(
    name="recvmsg",
    number=SYS_RECVMSG,
    arg_types=(ArgType.SOCKET, ArgType.VOID_BUF, ArgType.SIZE, ArgType.RECV_FLAG),
    generators=(generate_socket, generate_buf, generate_length, generate_recv_flags),
    need_alarm=True,
)

entry_setuid = SyscallEntry(
    name="setuid",
    number=SYS_SETUID,
    arg_types=(ArgType.INT,),
    generators=(generate_int,),
)

entry_unlink = SyscallEntry(
    name="unlink",
    number=SYS_UNLINK,
    arg_types=(ArgType.FILE_PATH,),
    generators=(generate_path,),
)

entry_unmount = SyscallEntry(
    name="unmount",
    number=SYS_UNMOUNT,
    arg_types=(ArgType.DIR_PATH, ArgType.UNMOUNT_FLAG),
    generators=(generate_dirpath, generate_unmount_flags),
    requires_root=True,
)

entry_wait4 = SyscallEntry(
    name="wait4",
    number=SYS_WAIT4,
    arg_types=(ArgType.PID, ArgType.INT, ArgType.WAIT_OPTION, ArgType.RUSAGE),
    generators=(generate_pid, generate_int, generate_wait_option, generate_rusage),
)

entry_write = SyscallEntry(
    name="write",
    number=SYS_WRITE,
    arg_types=(ArgType.FILE_DESC, ArgType.VOID_BUF, ArgType.SIZE),
    generators=(generate_fd, generate_buf, generate_length),
)

_TABLE: tuple[SyscallEntry, ...] = (
    entry_read,
    entry_write,
    entry_open,
    entry_close,
    entry_wait4,
    entry_creat,
    entry_link,
    entry_unlink,
    entry_chdir,
    entry_fchdir,
    entry_mknod,
    entry_chmod,
    entry_getfsstat,
    entry_lseek,
    entry_mount,
    entry_unmount,
    entry_setuid,
    entry_ptrace,
    entry_recvmsg,
)

_BY_NAME: dict[str, SyscallEntry] = {entry.name: entry for entry in _TABLE}


def get_table() -> tuple[SyscallEntry, ...]:
    """Return every syscall entry, in table order."""
    return _TABLE


def find_entry(name: str) -> SyscallEntry:
    """Return the entry for the syscall called ``name``.

    Raises KeyError when no entry has that name.
    """
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"no syscall entry named {name!r}") from None