import threading
import time

import pytest

from formmail.utils.once import TryOnce


def test_runs_only_once():
    once = TryOnce()
    calls = []
    once.try_do(lambda: calls.append(1))
    once.try_do(lambda: calls.append(2))
    assert calls == [1]


def test_failure_allows_another_attempt():
    once = TryOnce()

    def fail():
        raise RuntimeError('not yet')

    with pytest.raises(RuntimeError):
        once.try_do(fail)

    calls = []
    once.try_do(lambda: calls.append('second'))
    once.try_do(lambda: calls.append('third'))
    assert calls == ['second']


def test_reset():
    once = TryOnce()
    calls = []
    once.try_do(lambda: calls.append(1))
    once.reset()
    once.try_do(lambda: calls.append(2))
    assert calls == [1, 2]


def test_concurrent_callers_run_fn_once():
    once = TryOnce()
    calls = []

    def slow():
        time.sleep(0.05)
        calls.append(1)

    threads = [threading.Thread(target=once.try_do, args=(slow,)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert calls == [1]
