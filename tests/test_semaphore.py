import threading
import time

import pytest

from spacelink.semaphore import BinarySemaphore


def test_initially_available_once():
    sem = BinarySemaphore()
    assert sem.wait(0) is True
    assert sem.wait(0) is False


def test_post_makes_available():
    sem = BinarySemaphore()
    assert sem.wait(0) is True
    sem.post()
    assert sem.wait(0) is True


def test_count_never_exceeds_one():
    sem = BinarySemaphore()
    sem.post()
    sem.post()
    assert sem.wait(0) is True
    assert sem.wait(0) is False


def test_timeout_waits():
    sem = BinarySemaphore()
    sem.wait(0)
    start = time.monotonic()
    assert sem.wait(200) is False
    assert time.monotonic() - start >= 0.15


def test_post_from_other_thread_wakes_waiter():
    sem = BinarySemaphore()
    sem.wait(0)

    def poster():
        time.sleep(0.05)
        sem.post()

    t = threading.Thread(target=poster)
    t.start()
    assert sem.wait(2000) is True
    t.join()


def test_negative_timeout_rejected():
    sem = BinarySemaphore()
    sem.wait(0)
    with pytest.raises(ValueError):
        sem.wait(-5)