"""Command line parsing and the shared state that configures a fuzzing run."""

from __future__ import annotations

import enum
import getopt
import os
import stat
from dataclasses import dataclass
from typing import Sequence


class FuzzMode(enum.IntEnum):
    """What the fuzzer targets."""

    FILE = 0
    SYSCALL = 1
    NETWORK = 2


class CryptoMethod(enum.IntEnum):
    """Where random numbers come from."""

    CRYPTO = 0
    NO_CRYPTO = 1


class UsageError(Exception):
    """Raised when the command line or a configuration value is invalid."""


class HelpRequested(Exception):
    """Raised when the user asks for help; the message is the help banner."""


_SHORT_OPTIONS = "p:e:"
_LONG_OPTIONS = [
    "in=",
    "out=",
    "exec=",
    "crypto=",
    "port=",
    "address=",
    "protocol=",
    "args=",
    "file",
    "network",
    "syscall",
    "help",
    "dumb",
]


def help_banner() -> str:
    """Return the usage text shown for --help."""
    return (
        "Nextgen is a Genetic File, Syscall, and Network Fuzzer.\n"
        "To use the file fuzzer in smart mode run the command below.\n"
        "sudo ./nextgen --file --in /path/to/in/directory --out "
        "/path/to/out/directory --exec /path/to/target/exec .\n"
        "To use the syscall fuzzer in smart mode run.\n"
        "sudo ./nextgen --syscall --out /path/to/out/directory\n"
        "To use dumb mode just pass --dumb with any of the above commands.\n"
    )


def _stat(path: str) -> os.stat_result:
    if path is None:
        raise UsageError("Path supplied is None")
    try:
        return os.stat(path)
    except OSError as exc:
        raise UsageError(f"Can't get stats: {exc.strerror or exc}") from exc


@dataclass
class ParserContext:
    """Settings collected from the command line."""

    mode: FuzzMode = FuzzMode.FILE
    exec_path: str | None = None
    input_path: str | None = None
    output_path: str | None = None
    method: CryptoMethod = CryptoMethod.CRYPTO
    args: str | None = None
    smart_mode: bool = True

    def set_input_path(self, path: str) -> None:
        """Use ``path``, which must be an existing directory, as the input directory."""
        info = _stat(path)
        if not info.st_mode & stat.S_IFDIR:
            raise UsageError("Input path is not a directory")
        self.input_path = path

    def set_output_path(self, path: str) -> None:
        """Use ``path``, which must not exist yet, as the output directory."""
        if path is None:
            raise UsageError("Path supplied is None")
        if os.path.lexists(path):
            raise UsageError("Path already exist")
        self.output_path = path

    def set_exec_path(self, path: str) -> None:
        """Use ``path``, which must be executable by its owner, as the target."""
        info = _stat(path)
        if not info.st_mode & stat.S_IXUSR:
            raise UsageError("Exec path is not a excutable")
        self.exec_path = path

    def set_fuzz_mode(self, mode: FuzzMode | int) -> None:
        """Select the fuzzing mode."""
        try:
            self.mode = FuzzMode(mode)
        except ValueError:
            raise UsageError(f"Unknown fuzz mode: {mode!r}") from None

    def set_crypto_method(self, method: CryptoMethod | int) -> None:
        """Select where random numbers come from."""
        try:
            self.method = CryptoMethod(method)
        except ValueError:
            raise UsageError(f"Unknown crypto method: {method!r}") from None


def parse_cmd_line(argv: Sequence[str]) -> ParserContext:
    """Parse the arguments after the program name into a :class:`ParserContext`.

    Raises HelpRequested for --help and UsageError for any invalid command line.
    """
    try:
        options, _ = getopt.gnu_getopt(list(argv), _SHORT_OPTIONS, _LONG_OPTIONS)
    except getopt.GetoptError as exc:
        raise UsageError(f"Unknown option: {exc.msg}") from exc

    ctx = ParserContext()
    seen: set[str] = set()

    for option, value in options:
        if option == "--help":
            raise HelpRequested(help_banner())
        if option in ("-p", "--port"):
            seen.add("port")
        elif option == "--address":
            seen.add("address")
        elif option in ("-e", "--exec"):
            ctx.set_exec_path(value)
            seen.add("exec")
        elif option == "--in":
            ctx.set_input_path(value)
            seen.add("in")
        elif option == "--out":
            ctx.set_output_path(value)
            seen.add("out")
        elif option == "--file":
            ctx.set_fuzz_mode(FuzzMode.FILE)
            seen.add("file")
        elif option == "--network":
            ctx.set_fuzz_mode(FuzzMode.NETWORK)
            seen.add("network")
        elif option == "--syscall":
            ctx.set_fuzz_mode(FuzzMode.SYSCALL)
            seen.add("syscall")
        elif option in ("--crypto", "--protocol"):
            ctx.set_crypto_method(CryptoMethod.NO_CRYPTO)
        elif option == "--dumb":
            ctx.smart_mode = False
        elif option == "--args":
            ctx.args = value
        else:
            raise UsageError(f"Unknown option: {option}")

    if not seen & {"file", "network", "syscall"}:
        raise UsageError("Specify a fuzzing mode")

    if "file" in seen and not {"in", "out", "exec"} <= seen:
        raise UsageError("Pass --exec , --in and --out for file mode")

    # No option marks the protocol as given, so network mode is never complete.
    if "network" in seen and not {"address", "protocol", "out"} <= seen:
        raise UsageError(
            "Pass --address , --port, --protocol, and --out for network mode"
        )

    if "syscall" in seen and "out" not in seen:
        raise UsageError("Pass --out for syscall mode")

    return ctx


@dataclass
class SharedMap:
    """State shared by every process and thread of a fuzzing run."""

    mode: FuzzMode
    method: CryptoMethod
    smart_mode: bool
    path_to_in_dir: str | None = None
    path_to_out_dir: str | None = None
    exec_path: str | None = None
    msg_port: int = 0
    god_pid: int = 0
    target_pid: int = 0
    reaper_pid: int = 0
    runloop_pid: int = 0
    socket_server_pid: int = 0
    test_counter: int = 0
    stop: bool = False
    socket_server_port: int = 0

    def clean(self) -> None:
        """Release the paths held for the current mode."""
        if self.mode == FuzzMode.SYSCALL:
            self.path_to_out_dir = None
        elif self.mode == FuzzMode.FILE:
            self.path_to_out_dir = None
            self.path_to_in_dir = None
            self.exec_path = None
        elif self.mode != FuzzMode.NETWORK:
            raise ValueError(f"Unknown fuzzing mode: {self.mode!r}")


def init_shared_mapping(ctx: ParserContext) -> SharedMap:
    """Build the shared state for a run from parsed settings."""
    try:
        mode = FuzzMode(ctx.mode)
    except ValueError:
        raise ValueError(f"Unknown fuzzing mode: {ctx.mode!r}") from None

    mapping = SharedMap(mode=mode, method=ctx.method, smart_mode=ctx.smart_mode)

    if mode == FuzzMode.SYSCALL:
        mapping.path_to_out_dir = ctx.output_path
    elif mode == FuzzMode.FILE:
        mapping.path_to_out_dir = ctx.output_path
        mapping.path_to_in_dir = ctx.input_path
        mapping.exec_path = ctx.exec_path

    return mapping