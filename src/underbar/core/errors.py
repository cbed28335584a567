"""异常类型定义"""

from __future__ import annotations

from typing import Any


class UnderbarError(Exception):
    """underbar 所有异常的基类"""


class InvalidCollectionError(UnderbarError, TypeError):
    """传入的参数既不是序列也不是映射"""

    def __init__(self, value: Any, operation: str = "each"):
        self.value = value
        self.operation = operation
        super().__init__(
            f"{operation}() expects a sequence or a mapping, "
            f"got {type(value).__name__}"
        )


class EmptyReductionError(UnderbarError, ValueError):
    """对空集合归约且没有提供初始值"""

    def __init__(self) -> None:
        super().__init__("reduce() of empty collection with no initial value")
