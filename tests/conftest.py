from __future__ import annotations

from typing import Iterator

import pytest

from underbar.config.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """每个用例都重新读取环境变量构建设置"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def counter():
    """返回 (计数函数, 调用记录)，计数函数返回参数的平方"""
    calls = []

    def square(value=0):
        calls.append(value)
        return value * value

    return square, calls
