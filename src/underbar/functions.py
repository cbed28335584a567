"""
函数装饰器模块
once、memoize 返回持有自身状态的可调用对象；delay 在定时器线程上延迟执行
"""

from __future__ import annotations

import inspect
import threading
import time
from functools import partial, update_wrapper
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

import anyio

from .config.settings import get_settings
from .iteration import strict_key
from .utils.logging import get_logger

T = TypeVar('T')

logger = get_logger(__name__)


def _func_name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


class Once(Generic[T]):
    """最多执行一次的函数包装

    第一次调用执行被包装函数并缓存返回值，之后的调用（无论参数）都直接返回缓存值。
    被包装函数抛出异常时状态不变，下一次调用会重新执行。
    """

    def __init__(self, func: Callable[..., T]):
        self._func = func
        self._called = False
        self._result: Optional[T] = None
        # 可重入：被包装函数内部再次调用自身时不会死锁
        self._lock = threading.RLock()
        update_wrapper(self, func)

    @property
    def called(self) -> bool:
        return self._called

    @property
    def result(self) -> Optional[T]:
        return self._result

    def __call__(self, *args: Any, **kwargs: Any) -> Optional[T]:
        if not self._called:
            with self._lock:
                if not self._called:
                    self._result = self._func(*args, **kwargs)
                    self._called = True
                    logger.debug("once_invoked", func=_func_name(self._func))
        return self._result

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        # 作为方法使用时把接收者作为第一个参数传入；状态在所有实例间共享
        if instance is None:
            return self
        return partial(self, instance)

    def __repr__(self) -> str:
        return f"<Once {_func_name(self._func)} called={self._called}>"


class Memoized(Generic[T]):
    """单参数函数的记忆化包装

    参数必须可哈希。缓存键与 strict_equal 一致：1 与 1.0 命中同一项，
    True 和 "1" 各自独立。
    缓存无上限、不淘汰。
    """

    def __init__(self, func: Callable[[Any], T]):
        self._func = func
        self._cache: Dict[Tuple[Any, Hashable], T] = {}
        self._lock = threading.Lock()
        update_wrapper(self, func)

    @staticmethod
    def _key(arg: Hashable) -> Tuple[Any, Hashable]:
        return strict_key(arg)

    def __call__(self, arg: Hashable) -> T:
        key = self._key(arg)
        try:
            return self._cache[key]
        except KeyError:
            pass

        value = self._func(arg)
        with self._lock:
            # 并发未命中时以第一个写入的结果为准
            return self._cache.setdefault(key, value)

    def __contains__(self, arg: Hashable) -> bool:
        return self._key(arg) in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        """清空缓存"""
        with self._lock:
            self._cache.clear()

    def __repr__(self) -> str:
        return f"<Memoized {_func_name(self._func)} size={len(self._cache)}>"


def once(func: Callable[..., T]) -> Once[T]:
    """返回最多执行一次的包装函数"""
    return Once(func)


def memoize(func: Callable[[Any], T]) -> Memoized[T]:
    """返回记忆化的包装函数，func 只接受一个可哈希参数"""
    return Memoized(func)


def delay(func: Callable[..., Any], wait: float, *args: Any, **kwargs: Any) -> threading.Timer:
    """在 wait 毫秒之后于定时器线程中调用 func(*args, **kwargs)

    立即返回已启动的 threading.Timer，调用其 cancel() 可以取消尚未执行的调用。

    Raises:
        ValueError: wait 为负数
    """
    if wait < 0:
        raise ValueError(f"wait must be non-negative, got {wait}")

    name = _func_name(func)
    deadline = time.monotonic() + wait / 1000

    def fire() -> None:
        # 保证不会早于 deadline 执行
        remaining = deadline - time.monotonic()
        if remaining > 0:
            time.sleep(remaining)
        logger.debug("delay_fired", func=name, wait_ms=wait)
        try:
            func(*args, **kwargs)
        except Exception:
            # 定时器线程中没有调用方可以接收异常，记录后结束
            logger.exception("delayed_call_failed", func=name)

    timer = threading.Timer(wait / 1000, fire)
    timer.daemon = get_settings().timer_daemon
    timer.start()
    logger.debug("delay_scheduled", func=name, wait_ms=wait)
    return timer


async def delay_async(func: Callable[..., Any], wait: float, *args: Any, **kwargs: Any) -> Any:
    """delay 的异步版本：在当前事件循环上等待 wait 毫秒后调用 func

    func 返回可等待对象时会等待其结果。取消由调用方的 anyio cancel scope 负责。
    """
    if wait < 0:
        raise ValueError(f"wait must be non-negative, got {wait}")

    await anyio.sleep(wait / 1000)
    logger.debug("delay_fired", func=_func_name(func), wait_ms=wait)
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


__all__ = ['Once', 'Memoized', 'once', 'memoize', 'delay', 'delay_async']
