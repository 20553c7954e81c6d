# nxfuzz

nxfuzz holds the pieces a system call and file fuzzer is built from: a
catalogue of syscall argument types, one generator per argument type, a table
of syscall entries that ties them together, a reader for the entry point of
ELF executables, and the parsing of a fuzzing run's command line into shared
run state. It has no dependencies beyond the standard library.

## Modules

### `nxfuzz.argtypes`

- `ArgType`: an integer enum of every argument kind (`FILE_DESC`, `VOID_BUF`,
  `SIZE`, `FILE_PATH`, `OPEN_FLAG`, `MODE`, ... `DEV`).
- `ArgContext`: a frozen dataclass with the argument's `name`, `type`,
  `should_free` and `log_type` (a `LogType`: `NUMBER`, `POINTER` or `PATH`).
- `get_arg_context(arg_type)`: returns the `ArgContext` for an `ArgType` or
  its integer value; raises `ValueError` for anything else.

### `nxfuzz.generate`

Each `generate_*(ctx)` function produces the value of the argument at
`ctx.current_arg`, records that argument's size with `ctx.record_size` and
returns the value:

- descriptors, sockets, file paths and directory paths are picked at random
  from the context's `ResourcePool` (`descriptors`, `sockets`, `file_paths`,
  `dir_paths`); an empty pool raises `GenerationError`;
- `generate_buf` returns an anonymous private `mmap` of 1 to 1024 bytes with
  a randomly chosen protection;
- `generate_length` returns the recorded size of the previous argument;
- flag, mode, whence and ptrace-request generators pick one value from a
  fixed list, which for whence, mount flags and requests depends on the
  context's platform (`"freebsd"` or `"darwin"`);
- `generate_int` and `generate_offset` return a number from 0 to `INT_MAX`;
- `generate_fs_stat` and `generate_rusage` return zeroed `bytearray`s of the
  structure's size;
- `generate_pid` starts a Python process that sleeps until killed and returns
  its pid;
- `generate_mountpath` and `generate_mount_type` return `None` with size 0;
  `generate_dev` returns 0.

`ChildContext` carries the pool, the platform, the random source (a
`random.SystemRandom` by default), the current argument index and the list of
argument sizes. `rand_range(upper)` returns a number from 0 to `upper`
inclusive. Used as a context manager it kills, on exit, every process that
`generate_pid` started.

### `nxfuzz.entries` and `nxfuzz.table`

`SyscallEntry` is a frozen dataclass: `name`, `number`, `arg_types`,
`generators`, `status` (a `Status`: `ON` or `OFF`), `requires_root` and
`need_alarm`, with the properties `number_of_args` and `arg_contexts`.
`generate_args(ctx)` runs each generator in turn and returns the list of
values.

`nxfuzz.table.get_table()` returns all nineteen entries (read, write, open,
close, wait4, creat, link, unlink, chdir, fchdir, mknod, chmod, getfsstat,
lseek, mount, unmount, setuid, ptrace, recvmsg), using FreeBSD syscall
numbers. `find_entry(name)` returns one entry or raises `KeyError`.

### `nxfuzz.elfinfo`

`read_entry_point(path)` returns the entry address from the header of a 32-
or 64-bit ELF file of either byte order. Archives, non-ELF files, truncated
headers and unreadable files raise `ElfError`.

### `nxfuzz.config`

`parse_cmd_line(argv)` takes the arguments after the program name and
returns a `ParserContext`. It accepts `--file`, `--syscall`, `--network`,
`--in DIR`, `--out PATH`, `--exec`/`-e FILE`, `--port`/`-p`, `--address`,
`--crypto`, `--protocol`, `--args`, `--dumb` and `--help`.

- `--in` must be an existing directory, `--out` must not exist yet, and
  `--exec` must be executable by its owner.
- File mode needs `--in`, `--out` and `--exec`; syscall mode needs `--out`.
- Smart mode is on unless `--dumb` is given; the crypto method is `CRYPTO`
  unless `--crypto` or `--protocol` is given, which select `NO_CRYPTO`.
- Invalid input raises `UsageError`; `--help` raises `HelpRequested`, whose
  message is `help_banner()`.

`init_shared_mapping(ctx)` builds the `SharedMap` for a run, copying the
paths the selected `FuzzMode` uses; `SharedMap.clean()` drops them again.

## Example

```python
from nxfuzz.generate import ChildContext, ResourcePool
from nxfuzz.table import find_entry, get_table

print(len(get_table()), "system calls known")

pool = ResourcePool(file_paths=["/tmp/sample.txt"])
with ChildContext(pool=pool, platform="freebsd") as ctx:
    args = find_entry("open").generate_args(ctx)
    print(args, ctx.arg_sizes)
```

## What this package does not do

- It does not call any system call, run a target program or collect
  coverage; it only describes syscalls and produces argument values.
- It has no genetic algorithm, no process supervision and no output
  directory handling, and it installs no command: the fuzzing run itself is
  left to the code that uses these pieces.
- Network mode cannot be selected successfully: no option records a protocol,
  so `parse_cmd_line` always raises `UsageError` for `--network`.

## Tests

The tests use pytest, installed with the `test` extra:

    pip install -e .[test]
    pytest