from unittest.mock import MagicMock

import pytest

from formmail.utils.retry import retry, retry_on_failure


class Flaky:
    def __init__(self, failures, exc=RuntimeError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f'failure {self.calls}')
        return 'ok'


def test_first_success_stops(sleeps):
    func = Flaky(failures=0)
    assert retry(func, tries=3) == 'ok'
    assert func.calls == 1
    assert sleeps == []


def test_succeeds_after_failures_below_bound(sleeps):
    func = Flaky(failures=2)
    assert retry(func, tries=3, backoff=0.01) == 'ok'
    assert func.calls == 3
    assert sleeps == [0.01, 0.01]


def test_raises_last_error_after_all_tries(sleeps):
    func = Flaky(failures=5)
    with pytest.raises(RuntimeError, match='failure 3'):
        retry(func, tries=3)
    assert func.calls == 3
    assert len(sleeps) == 2


def test_doubling_backoff(sleeps):
    func = Flaky(failures=3)
    retry(func, tries=4, backoff=0.1, multiplier=2.0)
    assert sleeps == pytest.approx([0.1, 0.2, 0.4])


def test_other_exceptions_are_not_retried(sleeps):
    func = Flaky(failures=1, exc=KeyError)
    with pytest.raises(KeyError):
        retry(func, tries=3, retry_on=(RuntimeError,))
    assert func.calls == 1
    assert sleeps == []


def test_tries_must_be_positive():
    with pytest.raises(ValueError):
        retry(MagicMock(), tries=0)


def test_decorator(sleeps):
    calls = []

    @retry_on_failure(tries=2, backoff=0.5)
    def add(a, b):
        calls.append((a, b))
        if len(calls) == 1:
            raise RuntimeError('once')
        return a + b

    assert add(1, 2) == 3
    assert calls == [(1, 2), (1, 2)]
    assert sleeps == [0.5]
    assert add.__name__ == 'add'
