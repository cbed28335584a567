"""
核心模块初始化
导出类型和异常
"""

from .types import (
    Collection, CollectionKind, EachIterator, Predicate, Reducer,
    Success, Failure, Result
)

from .errors import (
    UnderbarError, InvalidCollectionError, EmptyReductionError
)

__all__ = [
    # 类型
    'Collection', 'CollectionKind', 'EachIterator', 'Predicate', 'Reducer',
    'Success', 'Failure', 'Result',

    # 异常
    'UnderbarError', 'InvalidCollectionError', 'EmptyReductionError'
]
