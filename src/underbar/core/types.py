"""
类型定义模块
集合类型标签、回调类型别名以及 Pydantic 结果模型
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


# 集合：序列或字符串键映射
Collection = Union[Sequence[Any], Mapping[str, Any]]

# each 的回调签名: (value, index_or_key, collection)
EachIterator = Callable[[Any, Any, Any], Any]
Predicate = Callable[[Any], Any]
Reducer = Callable[[Any, Any], Any]


# 基础 Pydantic 配置
class BaseTypeModel(BaseModel):
    """基础类型模型配置"""
    model_config = ConfigDict(
        frozen=True,  # 不可变
        extra='forbid',  # 禁止额外字段
        arbitrary_types_allowed=True,  # 允许任意类型
    )


class CollectionKind(str, Enum):
    """集合形状枚举"""
    SEQUENCE = "sequence"
    MAPPING = "mapping"

    @property
    def description(self) -> str:
        """获取集合类型描述"""
        descriptions = {
            CollectionKind.SEQUENCE: "序列 - 按索引顺序遍历",
            CollectionKind.MAPPING: "映射 - 按键遍历",
        }
        return descriptions[self]


# 结果类型 - 使用 Pydantic 模型，支持位置参数
class Success(BaseTypeModel):
    """成功结果模型"""
    value: Any = Field(description="成功返回的值")
    message: Optional[str] = Field(default=None, description="成功消息")

    def __init__(self, *args, **kwargs):
        """支持 Success(value)、Success(value, message) 和关键字参数"""
        if len(args) == 1 and not kwargs:
            super().__init__(value=args[0])
        elif len(args) == 2 and not kwargs:
            super().__init__(value=args[0], message=args[1])
        elif len(args) == 0:
            super().__init__(**kwargs)
        else:
            raise TypeError(f"Invalid arguments for Success: args={args}, kwargs={kwargs}")

    @computed_field
    @property
    def is_success(self) -> bool:
        return True


class Failure(BaseTypeModel):
    """失败结果模型"""
    error: str = Field(description="错误信息")
    error_code: Optional[str] = Field(default=None, description="错误代码")
    details: Optional[Dict[str, Any]] = Field(default=None, description="错误详情")

    def __init__(self, *args, **kwargs):
        """支持 Failure(error)、Failure(error, error_code) 和关键字参数"""
        if len(args) == 1 and not kwargs:
            super().__init__(error=args[0])
        elif len(args) == 2 and not kwargs:
            super().__init__(error=args[0], error_code=args[1])
        elif len(args) == 0:
            super().__init__(**kwargs)
        else:
            raise TypeError(f"Invalid arguments for Failure: args={args}, kwargs={kwargs}")

    @computed_field
    @property
    def is_success(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: Exception, error_code: Optional[str] = None) -> 'Failure':
        """从异常创建失败结果"""
        return cls(
            error=str(exc),
            error_code=error_code or exc.__class__.__name__,
            details={"exception_type": exc.__class__.__name__}
        )


Result = Union[Success, Failure]
