import os
import stat

import pytest

from nxfuzz.config import (
    CryptoMethod,
    FuzzMode,
    HelpRequested,
    ParserContext,
    SharedMap,
    UsageError,
    help_banner,
    init_shared_mapping,
    parse_cmd_line,
)


@pytest.fixture
def executable(tmp_path):
    path = tmp_path / "target"
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def plain_file(tmp_path):
    path = tmp_path / "plain.txt"
    path.write_text("data")
    path.chmod(0o644)
    return str(path)


def test_cmd_parser_without_mode_fails():
    with pytest.raises(UsageError, match="Specify a fuzzing mode"):
        parse_cmd_line([])


def test_cmd_parser_syscall_mode(tmp_path):
    out = str(tmp_path / "syscall_results")
    ctx = parse_cmd_line(["--syscall", "--out", out])
    assert ctx.mode == FuzzMode.SYSCALL
    assert ctx.output_path == out
    assert ctx.smart_mode is True
    assert ctx.method == CryptoMethod.CRYPTO


def test_cmd_parser_syscall_needs_out():
    with pytest.raises(UsageError, match="--out for syscall"):
        parse_cmd_line(["--syscall"])


def test_cmd_parser_file_mode(tmp_path, executable):
    out = str(tmp_path / "out")
    ctx = parse_cmd_line(
        ["--file", "--in", str(tmp_path), "--out", out, "--exec", executable]
    )
    assert ctx.mode == FuzzMode.FILE
    assert ctx.input_path == str(tmp_path)
    assert ctx.output_path == out
    assert ctx.exec_path == executable


def test_cmd_parser_file_mode_missing_args(tmp_path):
    with pytest.raises(UsageError, match="for file mode"):
        parse_cmd_line(["--file", "--in", str(tmp_path)])


def test_cmd_parser_network_mode_incomplete(tmp_path):
    out = str(tmp_path / "net")
    with pytest.raises(UsageError, match="network mode"):
        parse_cmd_line(["--network", "--address", "127.0.0.1", "--port", "80", "--out", out])


def test_cmd_parser_dumb_crypto_and_args(tmp_path):
    out = str(tmp_path / "o")
    ctx = parse_cmd_line(["--syscall", "--dumb", "--crypto", "x", "--args", "-v", "--out", out])
    assert ctx.smart_mode is False
    assert ctx.method == CryptoMethod.NO_CRYPTO
    assert ctx.args == "-v"


def test_cmd_parser_short_exec_option(tmp_path, executable):
    out = str(tmp_path / "o")
    ctx = parse_cmd_line(["--file", "-e", executable, "--in", str(tmp_path), "--out", out])
    assert ctx.exec_path == executable


def test_cmd_parser_help():
    with pytest.raises(HelpRequested) as info:
        parse_cmd_line(["--help"])
    assert str(info.value) == help_banner()


def test_cmd_parser_unknown_option():
    with pytest.raises(UsageError, match="Unknown option"):
        parse_cmd_line(["--bogus"])


def test_cmd_parser_bad_output_path(tmp_path):
    with pytest.raises(UsageError, match="already exist"):
        parse_cmd_line(["--syscall", "--out", str(tmp_path)])


def test_help_banner_mentions_modes():
    banner = help_banner()
    assert "--syscall --out" in banner
    assert "--dumb" in banner


def test_init_parser_ctx_defaults():
    ctx = ParserContext()
    assert ctx.mode == FuzzMode.FILE
    assert ctx.method == CryptoMethod.CRYPTO
    assert ctx.output_path is None


def test_set_fuzz_mode():
    ctx = ParserContext()
    with pytest.raises(UsageError):
        ctx.set_fuzz_mode(33)
    ctx.set_fuzz_mode(FuzzMode.SYSCALL)
    assert ctx.mode == FuzzMode.SYSCALL


def test_set_crypto_method():
    ctx = ParserContext()
    with pytest.raises(UsageError):
        ctx.set_crypto_method(33)
    ctx.set_crypto_method(CryptoMethod.CRYPTO)
    assert ctx.method == CryptoMethod.CRYPTO


def test_set_output_path(tmp_path, plain_file):
    ctx = ParserContext()
    with pytest.raises(UsageError):
        ctx.set_output_path(plain_file)
    with pytest.raises(UsageError):
        ctx.set_output_path(str(tmp_path))
    fresh = str(tmp_path / "fresh")
    ctx.set_output_path(fresh)
    assert ctx.output_path == fresh


def test_set_input_path(tmp_path, plain_file):
    ctx = ParserContext()
    with pytest.raises(UsageError, match="not a directory"):
        ctx.set_input_path(plain_file)
    ctx.set_input_path(str(tmp_path))
    assert ctx.input_path == str(tmp_path)


def test_set_input_path_missing(tmp_path):
    ctx = ParserContext()
    with pytest.raises(UsageError, match="Can't get stats"):
        ctx.set_input_path(str(tmp_path / "missing"))


def test_set_exec_path(executable, plain_file, tmp_path):
    ctx = ParserContext()
    with pytest.raises(UsageError, match="not a excutable"):
        ctx.set_exec_path(plain_file)
    with pytest.raises(UsageError):
        ctx.set_exec_path(str(tmp_path / "missing"))
    ctx.set_exec_path(executable)
    assert ctx.exec_path == executable
    assert os.stat(executable).st_mode & stat.S_IXUSR


def test_init_file_mapping(tmp_path, executable):
    ctx = ParserContext(
        mode=FuzzMode.FILE,
        input_path=str(tmp_path),
        output_path="out",
        exec_path=executable,
    )
    mapping = init_shared_mapping(ctx)
    assert mapping.mode == FuzzMode.FILE
    assert mapping.path_to_in_dir == str(tmp_path)
    assert mapping.path_to_out_dir == "out"
    assert mapping.exec_path == executable
    assert mapping.target_pid == 0
    assert mapping.stop is False
    mapping.clean()
    assert (mapping.path_to_in_dir, mapping.path_to_out_dir, mapping.exec_path) == (
        None,
        None,
        None,
    )


def test_init_syscall_mapping():
    ctx = ParserContext(mode=FuzzMode.SYSCALL, output_path="results", smart_mode=False)
    mapping = init_shared_mapping(ctx)
    assert mapping.mode == FuzzMode.SYSCALL
    assert mapping.path_to_out_dir == "results"
    assert mapping.path_to_in_dir is None
    assert mapping.test_counter == 0
    assert mapping.socket_server_port == 0
    assert mapping.smart_mode is False
    mapping.clean()
    assert mapping.path_to_out_dir is None


def test_init_network_mapping():
    ctx = ParserContext(mode=FuzzMode.NETWORK, output_path="net", method=CryptoMethod.NO_CRYPTO)
    mapping = init_shared_mapping(ctx)
    assert mapping.mode == FuzzMode.NETWORK
    assert mapping.method == CryptoMethod.NO_CRYPTO
    assert mapping.path_to_out_dir is None


def test_init_mapping_unknown_mode():
    ctx = ParserContext()
    ctx.mode = 33
    with pytest.raises(ValueError):
        init_shared_mapping(ctx)


def test_clean_unknown_mode():
    mapping = SharedMap(mode=FuzzMode.FILE, method=CryptoMethod.CRYPTO, smart_mode=True)
    mapping.mode = 33
    with pytest.raises(ValueError):
        mapping.clean()