from __future__ import annotations

import logging
from typing import Any

import structlog


def configure_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """初始化结构化日志。

    verbose 打开 DEBUG 级别（once/memoize/delay 的内部事件都在该级别）；
    json_logs 输出单行 JSON，便于重定向到文件。
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(level=log_level, format="%(message)s")

    renderer: Any
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """返回由标准库 logging 承载的 structlog 日志器

    未调用 configure_logging 时，级别过滤交给宿主程序的 logging 配置
    （默认 WARNING），库内部的 DEBUG 事件不会写到标准输出。
    """
    return structlog.wrap_logger(
        logging.getLogger(name or "underbar"),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
