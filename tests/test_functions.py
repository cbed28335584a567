import logging
import threading
import time

import anyio
import pytest
import structlog

from underbar.functions import Memoized, Once, delay, delay_async, memoize, once


# once
def test_once_runs_wrapped_function_a_single_time(counter):
    square, calls = counter
    wrapped = once(square)

    results = [wrapped(3) for _ in range(5)]

    assert calls == [3]
    assert results == [9] * 5


def test_once_ignores_later_arguments(counter):
    square, calls = counter
    wrapped = once(square)

    assert wrapped(2) == 4
    assert wrapped(10) == 4
    assert calls == [2]


def test_once_exposes_state(counter):
    square, _ = counter
    wrapped = once(square)
    assert isinstance(wrapped, Once)
    assert wrapped.called is False
    assert wrapped.result is None

    wrapped(4)
    assert wrapped.called is True
    assert wrapped.result == 16


def test_once_instances_are_independent(counter):
    square, calls = counter
    first, second = once(square), once(square)
    first(2)
    second(3)
    assert calls == [2, 3]


def test_once_retries_after_exception():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("boom")
        return "ok"

    wrapped = once(flaky)
    with pytest.raises(RuntimeError):
        wrapped()
    assert wrapped.called is False
    assert wrapped() == "ok"
    assert wrapped() == "ok"
    assert len(attempts) == 2


def test_once_is_exactly_once_under_concurrent_first_calls():
    calls = []
    barrier = threading.Barrier(8)

    def slow():
        calls.append(1)
        time.sleep(0.05)
        return "done"

    wrapped = once(slow)
    results = []

    def worker():
        barrier.wait()
        results.append(wrapped())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert results == ["done"] * 8


def test_once_as_method_decorator_passes_receiver():
    class Service:
        def __init__(self, name):
            self.name = name

        @once
        def connect(self):
            return f"connected:{self.name}"

    assert Service("a").connect() == "connected:a"
    # 状态在实例之间共享
    assert Service("b").connect() == "connected:a"
    assert isinstance(Service.__dict__["connect"], Once)


def test_once_preserves_metadata():
    def greet():
        """say hi"""
        return "hi"

    wrapped = once(greet)
    assert wrapped.__name__ == "greet"
    assert wrapped.__doc__ == "say hi"
    assert wrapped.__wrapped__ is greet


# memoize
def test_memoize_caches_by_argument(counter):
    square, calls = counter
    memo = memoize(square)

    assert memo(3) == 9
    assert memo(3) == 9
    assert calls == [3]

    assert memo(4) == 16
    assert calls == [3, 4]


def test_memoize_keys_follow_strict_equality():
    memo = memoize(lambda v: (type(v).__name__, v))

    assert memo(1) == ("int", 1)
    assert memo(True) == ("bool", True)
    assert memo("1") == ("str", "1")
    # 1.0 与 1 严格相等，命中同一缓存项
    assert memo(1.0) == ("int", 1)
    assert 1.0 in memo
    assert len(memo) == 3


def test_memoize_does_not_recompute_equal_numbers(counter):
    square, calls = counter
    memo = memoize(square)

    assert memo(2) == 4
    assert memo(2.0) == 4
    assert calls == [2]


def test_memoize_cache_inspection_and_clear(counter):
    square, calls = counter
    memo = memoize(square)
    memo(2)

    assert isinstance(memo, Memoized)
    assert 2 in memo
    assert 5 not in memo
    assert len(memo) == 1

    memo.clear()
    assert len(memo) == 0
    memo(2)
    assert calls == [2, 2]


def test_memoize_caches_none_results():
    calls = []

    def nothing(value):
        calls.append(value)
        return None

    memo = memoize(nothing)
    assert memo("a") is None
    assert memo("a") is None
    assert calls == ["a"]


def test_memoize_requires_hashable_argument(counter):
    square, _ = counter
    memo = memoize(square)
    with pytest.raises(TypeError):
        memo([1, 2])


def test_memoize_instances_do_not_share_cache(counter):
    square, calls = counter
    memoize(square)(3)
    memoize(square)(3)
    assert calls == [3, 3]


def test_memoize_preserves_metadata(counter):
    square, _ = counter
    assert memoize(square).__name__ == "square"


# delay
def test_delay_runs_after_wait_and_never_synchronously():
    fired = threading.Event()
    received = []

    def record(value):
        received.append((value, time.monotonic()))
        fired.set()

    start = time.monotonic()
    timer = delay(record, 50, "x")
    assert received == []
    assert isinstance(timer, threading.Timer)

    assert fired.wait(2)
    value, fired_at = received[0]
    assert value == "x"
    assert fired_at - start >= 0.05


def test_delay_forwards_keyword_arguments():
    fired = threading.Event()
    received = {}

    def record(a, b=None):
        received.update(a=a, b=b)
        fired.set()

    delay(record, 0, 1, b=2)
    assert fired.wait(2)
    assert received == {"a": 1, "b": 2}


def test_delay_can_be_cancelled():
    calls = []
    timer = delay(lambda: calls.append(1), 100)
    timer.cancel()
    time.sleep(0.2)
    assert calls == []


def test_delay_rejects_negative_wait():
    with pytest.raises(ValueError):
        delay(lambda: None, -1)


def test_delay_timer_daemon_follows_settings(monkeypatch):
    monkeypatch.setenv("UNDERBAR_TIMER_DAEMON", "false")
    timer = delay(lambda: None, 1000)
    try:
        assert timer.daemon is False
    finally:
        timer.cancel()


# delay_async
@pytest.mark.anyio
async def test_delay_async_returns_result_after_wait():
    start = time.monotonic()
    result = await delay_async(lambda x: x * 2, 20, 21)
    assert result == 42
    assert time.monotonic() - start >= 0.015


@pytest.mark.anyio
async def test_delay_async_awaits_coroutine_functions():
    async def fetch(value):
        await anyio.sleep(0)
        return value.upper()

    assert await delay_async(fetch, 0, "ok") == "OK"


@pytest.mark.anyio
async def test_delay_async_is_cancelled_with_scope():
    calls = []
    with anyio.move_on_after(0.01):
        await delay_async(calls.append, 500, 1)
    assert calls == []


@pytest.mark.anyio
async def test_delay_async_rejects_negative_wait():
    with pytest.raises(ValueError):
        await delay_async(lambda: None, -5)


# logging
@pytest.fixture
def unconfigured_structlog():
    saved = structlog.get_config()
    structlog.reset_defaults()
    yield
    structlog.configure(**saved)


def test_library_calls_write_nothing_to_stdout(unconfigured_structlog, capsys, counter):
    square, _ = counter
    once(square)(2)
    memoize(square)(3)

    fired = threading.Event()
    delay(fired.set, 0)
    assert fired.wait(2)

    assert capsys.readouterr().out == ""


def test_delay_failure_is_logged_once(monkeypatch, caplog):
    hooked = []
    monkeypatch.setattr(threading, "excepthook", hooked.append)

    def boom():
        raise RuntimeError("kaboom")

    with caplog.at_level(logging.ERROR, logger="underbar.functions"):
        timer = delay(boom, 0)
        timer.join(2)

    assert hooked == []
    assert "delayed_call_failed" in caplog.text
    assert len([r for r in caplog.records if r.name == "underbar.functions"]) == 1
