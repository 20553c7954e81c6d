"""Syscall argument generators, a syscall table, ELF entry points and fuzzing run configuration."""

__version__ = "0.1.0"