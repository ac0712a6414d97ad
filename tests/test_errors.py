import os

import pytest

from redtypes.errors import ErrorKind, RedisError, from_io_error, make_extension_error


@pytest.mark.parametrize(
    "kind, code",
    [
        (ErrorKind.RESPONSE_ERROR, "ERR"),
        (ErrorKind.EXEC_ABORT_ERROR, "EXECABORT"),
        (ErrorKind.BUSY_LOADING_ERROR, "LOADING"),
        (ErrorKind.NO_SCRIPT_ERROR, "NOSCRIPT"),
        (ErrorKind.MOVED, "MOVED"),
        (ErrorKind.ASK, "ASK"),
        (ErrorKind.TRY_AGAIN, "TRYAGAIN"),
        (ErrorKind.CLUSTER_DOWN, "CLUSTERDOWN"),
        (ErrorKind.CROSS_SLOT, "CROSSSLOT"),
        (ErrorKind.MASTER_DOWN, "MASTERDOWN"),
        (ErrorKind.READ_ONLY, "READONLY"),
    ],
)
def test_known_codes(kind, code):
    assert RedisError(kind, "x").code() == code


@pytest.mark.parametrize(
    "kind", [ErrorKind.TYPE_ERROR, ErrorKind.AUTHENTICATION_FAILED, ErrorKind.CLIENT_ERROR]
)
def test_no_code_for_client_side_kinds(kind):
    assert RedisError(kind, "x").code() is None


def test_extension_error_code_and_display():
    err = make_extension_error("WRONGPASS", "invalid username")
    assert err.kind is ErrorKind.EXTENSION_ERROR
    assert err.code() == "WRONGPASS"
    assert str(err) == "WRONGPASS: invalid username"
    assert err.detail == "invalid username"
    assert err.category() == "extension error"


def test_extension_error_default_detail():
    err = make_extension_error("FOO")
    assert err.detail == "Unknown extension error encountered"


def test_display_with_and_without_detail():
    assert str(RedisError(ErrorKind.TYPE_ERROR, "Invalid UTF-8")) == "Invalid UTF-8"
    err = RedisError(ErrorKind.TYPE_ERROR, "Response was of incompatible type", "x")
    assert str(err) == "Response was of incompatible type: x"


@pytest.mark.parametrize(
    "kind, category",
    [
        (ErrorKind.RESPONSE_ERROR, "response error"),
        (ErrorKind.ASK, "key moved (ask)"),
        (ErrorKind.IO_ERROR, "I/O error"),
        (ErrorKind.READ_ONLY, "read-only"),
        (ErrorKind.EXEC_ABORT_ERROR, "script execution aborted"),
    ],
)
def test_category(kind, category):
    assert RedisError(kind, "x").category() == category


def test_every_kind_has_category():
    for kind in ErrorKind:
        assert RedisError(kind, "x").category()


def test_cluster_errors():
    cluster = {ErrorKind.MOVED, ErrorKind.ASK, ErrorKind.TRY_AGAIN, ErrorKind.CLUSTER_DOWN}
    for kind in ErrorKind:
        assert RedisError(kind, "x").is_cluster_error() == (kind in cluster)


def test_redirect_node_moved():
    err = RedisError(ErrorKind.MOVED, "An error was signalled by the server", "3999 127.0.0.1:6381")
    assert err.redirect_node() == ("127.0.0.1:6381", 3999)


def test_redirect_node_ask():
    err = RedisError(ErrorKind.ASK, "ask", "12 host:1")
    assert err.redirect_node() == ("host:1", 12)


@pytest.mark.parametrize("detail", ["abc host:1", "12", "70000 host:1", "-1 host:1", ""])
def test_redirect_node_invalid(detail):
    assert RedisError(ErrorKind.MOVED, "moved", detail).redirect_node() is None


def test_redirect_node_other_kind():
    assert RedisError(ErrorKind.RESPONSE_ERROR, "e", "12 host:1").redirect_node() is None


def test_io_error_wrapping():
    cause = ConnectionRefusedError("refused")
    err = from_io_error(cause)
    assert err.kind is ErrorKind.IO_ERROR
    assert err.is_io_error()
    assert err.is_connection_refusal()
    assert not err.is_timeout()
    assert err.__cause__ is cause
    assert str(err) == "refused"


def test_not_found_is_refusal_on_posix():
    err = from_io_error(FileNotFoundError("missing"))
    assert err.is_connection_refusal() == (os.name == "posix")


@pytest.mark.parametrize("cause", [TimeoutError("t"), BlockingIOError("b")])
def test_timeouts(cause):
    err = from_io_error(cause)
    assert err.is_timeout()
    assert not err.is_connection_dropped()


@pytest.mark.parametrize("cause", [BrokenPipeError("p"), ConnectionResetError("r")])
def test_dropped(cause):
    err = from_io_error(cause)
    assert err.is_connection_dropped()
    assert not err.is_connection_refusal()


def test_non_io_error_predicates():
    err = RedisError(ErrorKind.RESPONSE_ERROR, "e")
    assert not err.is_io_error()
    assert not err.is_connection_refusal()
    assert not err.is_timeout()
    assert not err.is_connection_dropped()


def test_equality_rules():
    assert RedisError(ErrorKind.TYPE_ERROR, "a") == RedisError(ErrorKind.TYPE_ERROR, "b")
    assert RedisError(ErrorKind.TYPE_ERROR, "a") != RedisError(ErrorKind.CLIENT_ERROR, "a")
    assert RedisError(ErrorKind.TYPE_ERROR, "a") != RedisError(ErrorKind.TYPE_ERROR, "a", "d")
    assert make_extension_error("X", "1") == make_extension_error("X", "2")
    assert make_extension_error("X") != make_extension_error("Y")
    assert from_io_error(OSError("a")) != from_io_error(OSError("a"))


def test_is_raisable():
    err = RedisError(ErrorKind.CLIENT_ERROR, "bad")
    with pytest.raises(RedisError) as info:
        raise err
    assert info.value is err
    assert info.value.kind is ErrorKind.CLIENT_ERROR
    assert str(info.value) == "bad"
    assert info.value.category() == "client error"