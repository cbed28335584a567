"""
Underbar Package

A small library of functional collection and function utilities: iteration
primitives (each, reduce) with the operations built on them, and function
decorators (once, memoize, delay).
"""

__version__ = "0.1.0"
__author__ = "Underbar Contributors"

# Import main components for easy access
from .core.errors import UnderbarError, InvalidCollectionError, EmptyReductionError
from .core.types import CollectionKind
from .iteration import (
    each, map, filter, reject, reduce, contains, every, some,
    index_of, uniq, pluck, invoke, strict_equal, strict_key, collection_kind,
    first, last, shuffle, extend, defaults,
)
from .functions import Once, Memoized, once, memoize, delay, delay_async

__all__ = [
    # 集合操作
    "each", "map", "filter", "reject", "reduce", "contains", "every", "some",
    "index_of", "uniq", "pluck", "invoke", "strict_equal", "strict_key", "collection_kind",
    "first", "last", "shuffle", "extend", "defaults",

    # 函数装饰器
    "Once", "Memoized", "once", "memoize", "delay", "delay_async",

    # 类型与异常
    "CollectionKind", "UnderbarError", "InvalidCollectionError", "EmptyReductionError",
]
