import pytest

from spacelink.debug import DebugCounters, DebugErrno, csp_print, set_print_function


@pytest.fixture(autouse=True)
def _restore_printer():
    yield
    set_print_function(None)


def test_increment_counts():
    counters = DebugCounters()
    assert counters.increment("buffer_out") == 1
    assert counters.increment("buffer_out") == 2
    assert counters.buffer_out == 2
    assert counters.conn_out == 0


def test_increment_wraps_like_uint8():
    counters = DebugCounters(conn_ovf=255)
    assert counters.increment("conn_ovf") == 0


def test_increment_unknown_counter():
    with pytest.raises(KeyError):
        DebugCounters().increment("nope")


def test_increment_rejects_errno_field():
    with pytest.raises(KeyError):
        DebugCounters().increment("errno")


def test_reset_clears_everything():
    counters = DebugCounters()
    counters.increment("conn_noroute")
    counters.errno = DebugErrno.REFCOUNT
    counters.reset()
    assert counters == DebugCounters()
    assert counters.errno is None


def test_default_print_goes_to_stdout(capsys):
    csp_print("Client started\n")
    assert capsys.readouterr().out == "Client started\n"


def test_custom_print_function(capsys):
    captured = []
    set_print_function(captured.append)
    csp_print("hello")
    assert captured == ["hello"]
    assert capsys.readouterr().out == ""


def test_none_restores_stdout(capsys):
    set_print_function(lambda message: None)
    set_print_function(None)
    csp_print("back")
    assert capsys.readouterr().out == "back"