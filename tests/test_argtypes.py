import pytest

from nxfuzz.argtypes import ArgContext, ArgType, LogType, get_arg_context


@pytest.mark.parametrize("arg_type", list(ArgType))
def test_context_type_matches_request(arg_type):
    ctx = get_arg_context(arg_type)
    assert isinstance(ctx, ArgContext)
    assert ctx.type is arg_type


@pytest.mark.parametrize("arg_type", [t for t in ArgType if t is not ArgType.DEV])
def test_context_name_matches_member_name(arg_type):
    assert get_arg_context(arg_type).name == arg_type.name


def test_dev_context_name_is_lowercase():
    assert get_arg_context(ArgType.DEV).name == "dev"


def test_paths_and_descriptors_are_not_freed():
    kept = {t for t in ArgType if not get_arg_context(t).should_free}
    assert kept == {
        ArgType.FILE_DESC,
        ArgType.FILE_PATH,
        ArgType.DIR_PATH,
        ArgType.MOUNT_PATH,
    }


def test_log_types():
    assert get_arg_context(ArgType.FILE_PATH).log_type is LogType.PATH
    assert get_arg_context(ArgType.MOUNT_PATH).log_type is LogType.PATH
    assert get_arg_context(ArgType.DIR_PATH).log_type is LogType.POINTER
    assert get_arg_context(ArgType.VOID_BUF).log_type is LogType.POINTER
    assert get_arg_context(ArgType.SIZE).log_type is LogType.NUMBER


def test_enum_order():
    assert get_arg_context(0).type is ArgType.FILE_DESC
    assert get_arg_context(0).name == "FILE_DESC"
    assert get_arg_context(22).type is ArgType.DEV
    assert get_arg_context(13).name == "WHENCE"


def test_accepts_plain_int():
    assert get_arg_context(int(ArgType.WHENCE)) is get_arg_context(ArgType.WHENCE)


@pytest.mark.parametrize("bad", [-1, 23, 33])
def test_unknown_type_raises(bad):
    with pytest.raises(ValueError):
        get_arg_context(bad)


def test_contexts_are_immutable():
    ctx = get_arg_context(ArgType.INT)
    with pytest.raises(AttributeError):
        ctx.name = "OTHER"
    assert ctx.name == "INT"
    assert get_arg_context(ArgType.INT).name == "INT"