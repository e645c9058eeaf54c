import pytest

from mpboost import Retry
from mpboost.utils.retry import RetryPolicy


def test_retry_success_without_retry():
    call_count = {"n": 0}

    def func():
        call_count["n"] += 1
        return "ok"

    assert Retry.run(func, max_attempts=3) == "ok"
    assert call_count["n"] == 1


def test_retry_success_after_failures():
    call_count = {"n": 0}

    def func():
        call_count["n"] += 1
        if call_count["n"] < 3:
            raise OSError("disk hiccup")
        return "success"

    assert Retry.run(func, exceptions=(OSError,), max_attempts=5, delay=0.01, backoff=1) == "success"
    assert call_count["n"] == 3


def test_retry_raises_after_max_attempts():
    call_count = {"n": 0}

    def func():
        call_count["n"] += 1
        raise ValueError("fail")

    with pytest.raises(ValueError):
        Retry.run(func, max_attempts=3, delay=0.01)

    assert call_count["n"] == 3


def test_non_listed_exception_is_not_retried():
    call_count = {"n": 0}

    def func():
        call_count["n"] += 1
        raise ValueError("malformed")

    with pytest.raises(ValueError):
        Retry.run(func, exceptions=(OSError,), max_attempts=3, delay=0.01)

    assert call_count["n"] == 1


def test_empty_exception_tuple_disables_retry():
    call_count = {"n": 0}

    def func():
        call_count["n"] += 1
        raise OSError("boom")

    with pytest.raises(OSError):
        Retry.run(func, exceptions=(), max_attempts=3, delay=0.01)

    assert call_count["n"] == 1


def test_run_forwards_arguments():
    assert Retry.run(lambda a, b=0: a + b, 2, b=3, max_attempts=1) == 5


def test_exponential_backoff(monkeypatch):
    sleep_calls = []
    monkeypatch.setattr("time.sleep", lambda t: sleep_calls.append(t))

    def func():
        raise ValueError("fail")

    with pytest.raises(ValueError):
        Retry.run(func, max_attempts=4, delay=1, backoff=2, jitter=False)

    assert sleep_calls == [1, 2, 4]


def test_policy_backoff_without_jitter():
    policy = RetryPolicy((OSError,), max_attempts=4, delay=0.5, backoff=3, jitter=False)
    assert [policy.wait_for(a) for a in (1, 2, 3)] == [0.5, 1.5, 4.5]


def test_policy_jitter_stays_within_bounds():
    policy = RetryPolicy(delay=1.0, backoff=1.0, jitter=True)
    for _ in range(20):
        assert 0.8 <= policy.wait_for(1) <= 1.2
