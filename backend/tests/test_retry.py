"""Retry controller tests — attempt cap, backoff schedule, error filtering."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio

import pytest

from idea_validator.agents.idea_validation.errors import (
    UpstreamRateLimitedError,
    UpstreamRequestError,
    UpstreamUnavailableError,
)
from idea_validator.services.retry import backoff_delay, call_with_retry


class _Recorder:
    """Fake sleep that records requested delays instead of waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def _flaky(errors, result="ok"):
    calls = {"count": 0}

    async def fn():
        calls["count"] += 1
        if errors:
            raise errors.pop(0)
        return result

    return fn, calls


class TestBackoffDelay:
    def test_doubles_per_attempt(self):
        assert [backoff_delay(a, 2.0) for a in range(4)] == [2.0, 4.0, 8.0, 16.0]

    def test_adds_jitter(self):
        assert backoff_delay(1, 1.0, jitter=0.25) == 2.25


class TestCallWithRetry:
    def test_success_first_try(self):
        sleep = _Recorder()
        fn, calls = _flaky([])
        assert asyncio.run(call_with_retry(fn, 4, 2.0, sleep=sleep)) == "ok"
        assert calls["count"] == 1
        assert sleep.delays == []

    def test_recovers_after_transient_errors(self):
        sleep = _Recorder()
        fn, calls = _flaky([UpstreamRateLimitedError("429"), UpstreamUnavailableError("503")])
        result = asyncio.run(call_with_retry(fn, 4, 1.0, sleep=sleep, rand=lambda: 0.0))
        assert result == "ok"
        assert calls["count"] == 3
        assert sleep.delays == [1.0, 2.0]

    def test_always_429_stops_at_cap(self):
        sleep = _Recorder()
        fn, calls = _flaky([UpstreamRateLimitedError("429") for _ in range(10)])
        with pytest.raises(UpstreamRateLimitedError):
            asyncio.run(call_with_retry(fn, 4, 2.0, sleep=sleep, rand=lambda: 0.5))
        assert calls["count"] == 4
        # One sleep between each pair of attempts
        assert len(sleep.delays) == 3
        assert sum(sleep.delays) >= 2.0 * (1 + 2 + 4)

    def test_jitter_is_bounded(self):
        sleep = _Recorder()
        fn, _ = _flaky([UpstreamRateLimitedError("429")])
        asyncio.run(call_with_retry(fn, 2, 2.0, max_jitter=1.0, sleep=sleep, rand=lambda: 0.999))
        assert 2.0 <= sleep.delays[0] < 3.0

    def test_terminal_error_not_retried(self):
        sleep = _Recorder()
        fn, calls = _flaky([UpstreamRequestError("400", status_code=400)])
        with pytest.raises(UpstreamRequestError):
            asyncio.run(call_with_retry(fn, 4, 2.0, sleep=sleep))
        assert calls["count"] == 1
        assert sleep.delays == []

    def test_non_upstream_error_propagates(self):
        async def boom():
            raise KeyError("x")

        with pytest.raises(KeyError):
            asyncio.run(call_with_retry(boom, 4, 2.0, sleep=_Recorder()))

    def test_single_attempt(self):
        sleep = _Recorder()
        fn, calls = _flaky([UpstreamUnavailableError("503")])
        with pytest.raises(UpstreamUnavailableError):
            asyncio.run(call_with_retry(fn, 1, 2.0, sleep=sleep))
        assert calls["count"] == 1
        assert sleep.delays == []

    def test_rejects_zero_attempts(self):
        fn, _ = _flaky([])
        with pytest.raises(ValueError):
            asyncio.run(call_with_retry(fn, 0, 2.0))
