"""
集合操作模块
each 和 reduce 是两个基础原语，其余操作都由它们组合而成

集合是序列（list、tuple、range 等，字符串除外）或映射（dict 等）。
其他类型会抛出 InvalidCollectionError。
"""

from __future__ import annotations

import random
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, Iterator, List, Optional, Tuple

from .config.settings import get_settings
from .core.errors import EmptyReductionError, InvalidCollectionError
from .core.types import Collection, CollectionKind, EachIterator, Predicate, Reducer

# 区分“未传入初始值”和“显式传入 None”
_MISSING: Any = object()

_NUMERIC_TYPES = (int, float)


def collection_kind(collection: Any, operation: str = "each") -> CollectionKind:
    """判断集合形状，不是集合时抛出 InvalidCollectionError"""
    if isinstance(collection, Mapping):
        return CollectionKind.MAPPING
    if isinstance(collection, Sequence) and not isinstance(collection, (str, bytes, bytearray)):
        return CollectionKind.SEQUENCE
    raise InvalidCollectionError(collection, operation)


def _require_sequence(collection: Any, operation: str) -> Sequence[Any]:
    if collection_kind(collection, operation) is not CollectionKind.SEQUENCE:
        raise InvalidCollectionError(collection, operation)
    return collection


def _items(collection: Collection, operation: str) -> Iterator[Tuple[Any, Any]]:
    """按遍历顺序产出 (index_or_key, value)"""
    if collection_kind(collection, operation) is CollectionKind.SEQUENCE:
        yield from enumerate(collection)
    else:
        yield from collection.items()


def strict_key(value: Any) -> Tuple[Any, Any]:
    """与 strict_equal 一致的哈希键：int 与 float 同属数值类型，其余按具体类型区分"""
    return ("number" if type(value) in _NUMERIC_TYPES else type(value), value)


def strict_equal(left: Any, right: Any) -> bool:
    """严格相等：同类型且值相等；int 与 float 视为同一数值类型，bool 不等于数字"""
    if left is right:
        return True
    if type(left) is type(right):
        return left == right
    return (
        type(left) in _NUMERIC_TYPES
        and type(right) in _NUMERIC_TYPES
        and left == right
    )


# 基础原语
def each(collection: Collection, iterator: EachIterator) -> None:
    """对每个元素调用 iterator(value, index_or_key, collection)"""
    for key, value in _items(collection, "each"):
        iterator(value, key, collection)


def reduce(collection: Collection, iterator: Reducer, initial: Any = _MISSING) -> Any:
    """左折叠

    未传入 initial 时用第一个元素作为累加器，从第二个元素开始折叠。
    显式传入的 None 是合法的初始值。

    Raises:
        EmptyReductionError: 空集合且没有初始值
    """
    collection_kind(collection, "reduce")
    accumulator = initial

    def fold(value: Any, _key: Any, _coll: Any) -> None:
        nonlocal accumulator
        if accumulator is _MISSING:
            accumulator = value
        else:
            accumulator = iterator(accumulator, value)

    each(collection, fold)
    if accumulator is _MISSING:
        raise EmptyReductionError()
    return accumulator


# 映射和过滤
def map(collection: Collection, iterator: Predicate) -> List[Any]:
    """按位置返回 iterator(value) 的结果列表"""
    results: List[Any] = []
    each(collection, lambda value, _key, _coll: results.append(iterator(value)))
    return results


def filter(collection: Collection, iterator: Predicate) -> List[Any]:
    """保留 iterator(value) 为真的元素，顺序和重复项不变"""
    kept: List[Any] = []

    def keep(value: Any, _key: Any, _coll: Any) -> None:
        if iterator(value):
            kept.append(value)

    each(collection, keep)
    return kept


def reject(collection: Collection, iterator: Predicate) -> List[Any]:
    """filter 的补集"""
    return filter(collection, lambda value: not iterator(value))


def pluck(collection: Collection, property_name: Any) -> List[Any]:
    """取出每个元素的某个属性；不存在时为 None"""
    return map(collection, lambda item: _get_property(item, property_name))


def _get_property(item: Any, name: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    if isinstance(name, int) and isinstance(item, Sequence) and not isinstance(item, str):
        return item[name] if -len(item) <= name < len(item) else None
    if isinstance(name, str):
        return getattr(item, name, None)
    return None


def invoke(collection: Collection, method: Any, args: Any = _MISSING) -> List[Any]:
    """对每个元素调用方法

    method 为字符串时调用 item.<method>(args)；
    为可调用对象时调用 method(item, args)，元素作为接收者。
    只转发单个 args 值，省略时不传参。
    """
    if isinstance(method, str):
        def call(item: Any) -> Any:
            bound = getattr(item, method)
            return bound() if args is _MISSING else bound(args)
    elif callable(method):
        def call(item: Any) -> Any:
            return method(item) if args is _MISSING else method(item, args)
    else:
        raise TypeError(f"invoke() expects a method name or a callable, got {type(method).__name__}")

    return map(collection, call)


# 查询
def contains(collection: Collection, target: Any) -> bool:
    """集合中是否存在与 target 严格相等的元素"""
    return reduce(
        collection,
        lambda was_found, item: was_found or strict_equal(item, target),
        False,
    )


def every(collection: Collection, iterator: Optional[Predicate] = None) -> bool:
    """所有元素都满足谓词；空集合或未提供谓词时为 True"""
    if iterator is None:
        collection_kind(collection, "every")
        return True
    return reduce(
        collection,
        lambda all_passed, item: all_passed and bool(iterator(item)),
        True,
    )


def some(collection: Collection, iterator: Optional[Predicate] = None) -> bool:
    """至少一个元素满足谓词；默认谓词为真值判断"""
    predicate = iterator if iterator is not None else bool
    return not every(collection, lambda item: not predicate(item))


def index_of(sequence: Sequence[Any], target: Any) -> int:
    """第一个与 target 严格相等的元素下标，不存在时返回 -1"""
    _require_sequence(sequence, "index_of")
    found = -1

    def check(value: Any, index: int, _coll: Any) -> None:
        nonlocal found
        if found == -1 and strict_equal(value, target):
            found = index

    each(sequence, check)
    return found


def uniq(collection: Collection) -> List[Any]:
    """去重，保留首次出现的顺序

    可哈希的值用集合判重，不可哈希的值（list、dict）退回线性查找。
    """
    result: List[Any] = []
    seen: set = set()

    def keep(value: Any, _key: Any, _coll: Any) -> None:
        try:
            marker = strict_key(value)
            if marker in seen:
                return
            seen.add(marker)
        except TypeError:
            if contains(result, value):
                return
        result.append(value)

    each(collection, keep)
    return result


# 序列切片
def first(sequence: Sequence[Any], n: Optional[int] = None) -> Any:
    """n 为 None 时返回第一个元素（空序列返回 None），否则返回前 n 个元素"""
    _require_sequence(sequence, "first")
    if n is None:
        return sequence[0] if len(sequence) else None
    return list(sequence[:n])


def last(sequence: Sequence[Any], n: Optional[int] = None) -> Any:
    """n 为 None 时返回最后一个元素（空序列返回 None），否则返回后 n 个元素"""
    _require_sequence(sequence, "last")
    if n is None:
        return sequence[-1] if len(sequence) else None
    if n == 0:
        return []
    return list(sequence[-n:])


def shuffle(sequence: Sequence[Any], rng: Optional[random.Random] = None) -> List[Any]:
    """Fisher–Yates 洗牌，返回新列表，不修改输入"""
    _require_sequence(sequence, "shuffle")
    if rng is None:
        rng = random.Random(get_settings().shuffle_seed)

    shuffled = list(sequence)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


# 对象合并
def _require_mutable_mapping(target: Any, operation: str) -> MutableMapping[str, Any]:
    if not isinstance(target, MutableMapping):
        raise InvalidCollectionError(target, operation)
    return target


def extend(target: MutableMapping[str, Any], *sources: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """把每个 source 的键浅拷贝到 target，后面的 source 覆盖前面的"""
    _require_mutable_mapping(target, "extend")

    def assign(value: Any, key: str, _coll: Any) -> None:
        target[key] = value

    for source in sources:
        if collection_kind(source, "extend") is not CollectionKind.MAPPING:
            raise InvalidCollectionError(source, "extend")
        each(source, assign)
    return target


def defaults(target: MutableMapping[str, Any], *sources: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """与 extend 相同，但从不覆盖 target 中已有的键"""
    _require_mutable_mapping(target, "defaults")

    def fill(value: Any, key: str, _coll: Any) -> None:
        if key not in target:
            target[key] = value

    for source in sources:
        if collection_kind(source, "defaults") is not CollectionKind.MAPPING:
            raise InvalidCollectionError(source, "defaults")
        each(source, fill)
    return target


__all__ = [
    # 基础原语
    'each', 'reduce',

    # 映射和过滤
    'map', 'filter', 'reject', 'pluck', 'invoke',

    # 查询
    'contains', 'every', 'some', 'index_of', 'uniq', 'strict_equal', 'strict_key',

    # 序列切片
    'first', 'last', 'shuffle',

    # 对象合并
    'extend', 'defaults',

    'collection_kind',
]
