from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .defaults import (
    ENV_PREFIX,
    JSON_INDENT_DEFAULT,
    JSON_INDENT_MAX,
    SHUFFLE_SEED_DEFAULT,
    TIMER_DAEMON_DEFAULT,
    VERBOSE_DEFAULT,
)


class AppSettings(BaseSettings):
    """全局应用设置（可由环境变量/配置文件覆盖）"""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    verbose: bool = Field(default=VERBOSE_DEFAULT, description="详细日志输出")
    log_json: bool = Field(default=False, description="以 JSON 格式输出日志")

    # 函数装饰器
    timer_daemon: bool = Field(default=TIMER_DAEMON_DEFAULT, description="delay 定时器线程是否为守护线程")

    # 集合操作
    shuffle_seed: Optional[int] = Field(default=SHUFFLE_SEED_DEFAULT, description="shuffle 默认随机种子")

    # CLI 输出
    json_indent: int = Field(default=JSON_INDENT_DEFAULT, ge=0, le=JSON_INDENT_MAX, description="JSON 输出缩进")

    config_file: Optional[Path] = Field(default=None, description="配置文件路径，可选")


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """读取环境变量构建的全局设置（缓存）"""
    return AppSettings()


__all__ = ["AppSettings", "get_settings"]
