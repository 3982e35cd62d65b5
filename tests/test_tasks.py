import threading

import pytest

from spacelink.tasks import run_forever, start_task


def test_start_task_runs_routine_in_daemon_thread():
    done = threading.Event()
    thread = start_task(done.set, name="router")
    assert done.wait(2.0)
    assert thread.daemon is True
    assert thread.name == "router"


def test_start_task_runs_in_other_thread():
    seen = []
    finished = threading.Event()

    def routine():
        seen.append(threading.get_ident())
        finished.set()

    thread = start_task(routine)
    assert finished.wait(2.0)
    thread.join(2.0)
    assert seen == [thread.ident]
    assert thread.ident != threading.get_ident()


class _Stop(Exception):
    pass


def test_run_forever_calls_work_until_it_raises():
    calls = []

    def work():
        calls.append(1)
        if len(calls) == 5:
            raise _Stop

    with pytest.raises(_Stop):
        run_forever(work)
    assert len(calls) == 5