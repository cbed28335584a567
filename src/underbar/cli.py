"""
命令行入口
使用 typer 和 rich 对 JSON/YAML 数据执行集合操作
"""

from __future__ import annotations

import operator
import random
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from . import iteration
from .config.settings import AppSettings
from .core.errors import UnderbarError
from .core.types import Failure, Result, Success
from .utils.logging import configure_logging, get_logger

# 创建应用和控制台
app = typer.Typer(
    name="underbar",
    help="函数式集合工具：对 JSON/YAML 数据执行 uniq、pluck、reduce 等操作",
    add_completion=False,
    rich_markup_mode="rich"
)
console = Console()

logger = get_logger(__name__)

app_settings = AppSettings()


class ReduceOp(str, Enum):
    """reduce 命令支持的二元运算"""
    SUM = "sum"
    PRODUCT = "product"
    MIN = "min"
    MAX = "max"


_REDUCERS: dict[ReduceOp, Callable[[Any, Any], Any]] = {
    ReduceOp.SUM: operator.add,
    ReduceOp.PRODUCT: operator.mul,
    ReduceOp.MIN: min,
    ReduceOp.MAX: max,
}

# ops 命令展示的操作列表
OPERATIONS = [
    ("each", "iteration", "对每个元素调用 iterator(value, key, collection)"),
    ("map", "iteration", "按位置映射"),
    ("filter / reject", "iteration", "按谓词保留 / 排除"),
    ("reduce", "iteration", "左折叠，可选初始值"),
    ("contains", "iteration", "是否包含严格相等的值"),
    ("every / some", "iteration", "全部 / 任一满足谓词"),
    ("index_of", "iteration", "第一个匹配的下标"),
    ("uniq", "iteration", "去重"),
    ("pluck", "iteration", "提取属性"),
    ("invoke", "iteration", "对每个元素调用方法"),
    ("first / last", "iteration", "取首 / 尾元素"),
    ("shuffle", "iteration", "Fisher–Yates 洗牌"),
    ("extend / defaults", "iteration", "浅拷贝合并映射"),
    ("once", "functions", "最多执行一次"),
    ("memoize", "functions", "单参数记忆化"),
    ("delay / delay_async", "functions", "延迟执行"),
]


# 回调函数
def version_callback(value: bool):
    """版本回调"""
    if value:
        console.print(f"underbar v{__version__}")
        raise typer.Exit()


# 全局选项
@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False, "--verbose",
        help="详细输出"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config-file", "-c", help="从配置文件加载设置 (YAML/JSON)"
    ),
):
    """函数式集合工具"""
    global app_settings
    if config_file and config_file.exists():
        try:
            file_data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            console.print(f"[red]读取配置文件失败: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        try:
            app_settings = AppSettings(**{**file_data, "config_file": config_file})
        except (TypeError, ValidationError) as e:
            console.print(f"[red]配置文件无效: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        app_settings = AppSettings()

    configure_logging(verbose or app_settings.verbose, app_settings.log_json)
    logger.debug("cli_started", verbose=verbose, config_file=str(config_file) if config_file else None)


# 输入输出
def load_collection(source: Path) -> Any:
    """读取 JSON/YAML 文档，"-" 表示标准输入"""
    try:
        if str(source) == "-":
            text = sys.stdin.read()
        else:
            text = source.read_text(encoding="utf-8")
        return yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]读取输入失败: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def parse_value(raw: str) -> Any:
    """把命令行参数按 YAML 标量解析，例如 "2" -> 2, "true" -> True"""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def run_operation(name: str, func: Callable[[], Any]) -> Result:
    """执行操作并把异常转换为 Failure"""
    try:
        return Success(func())
    except (UnderbarError, TypeError, ValueError) as e:
        logger.debug("operation_failed", operation=name, error=str(e))
        return Failure.from_exception(e)


def emit(name: str, result: Result) -> None:
    """输出 JSON 结果，失败时以退出码 1 结束"""
    if isinstance(result, Failure):
        console.print(f"[red]{name} 失败 ({result.error_code}): {escape(result.error)}[/red]")
        raise typer.Exit(1)
    console.print_json(data=result.value, indent=app_settings.json_indent or None)


FILE_ARGUMENT = typer.Argument(..., help="JSON/YAML 输入文件，- 表示标准输入")


# 命令
@app.command("ops")
def list_operations():
    """列出可用的操作"""
    table = Table(title="underbar 操作")
    table.add_column("操作", style="cyan")
    table.add_column("模块", style="magenta")
    table.add_column("说明", style="green")
    for name, module, description in OPERATIONS:
        table.add_row(name, module, description)
    console.print(table)


@app.command()
def uniq(source: Path = FILE_ARGUMENT):
    """去重"""
    data = load_collection(source)
    emit("uniq", run_operation("uniq", lambda: iteration.uniq(data)))


@app.command()
def pluck(
    source: Path = FILE_ARGUMENT,
    property_name: str = typer.Argument(..., help="属性名"),
):
    """提取每个元素的属性"""
    data = load_collection(source)
    emit("pluck", run_operation("pluck", lambda: iteration.pluck(data, property_name)))


@app.command()
def contains(
    source: Path = FILE_ARGUMENT,
    value: str = typer.Argument(..., help="目标值（按 YAML 标量解析）"),
):
    """是否包含严格相等的值"""
    data = load_collection(source)
    target = parse_value(value)
    emit("contains", run_operation("contains", lambda: iteration.contains(data, target)))


@app.command("index-of")
def index_of(
    source: Path = FILE_ARGUMENT,
    value: str = typer.Argument(..., help="目标值（按 YAML 标量解析）"),
):
    """第一个匹配值的下标，不存在时为 -1"""
    data = load_collection(source)
    target = parse_value(value)
    emit("index-of", run_operation("index-of", lambda: iteration.index_of(data, target)))


@app.command()
def first(
    source: Path = FILE_ARGUMENT,
    n: Optional[int] = typer.Option(None, "-n", help="取前 n 个元素"),
):
    """取第一个（或前 n 个）元素"""
    data = load_collection(source)
    emit("first", run_operation("first", lambda: iteration.first(data, n)))


@app.command()
def last(
    source: Path = FILE_ARGUMENT,
    n: Optional[int] = typer.Option(None, "-n", help="取后 n 个元素"),
):
    """取最后一个（或后 n 个）元素"""
    data = load_collection(source)
    emit("last", run_operation("last", lambda: iteration.last(data, n)))


@app.command()
def shuffle(
    source: Path = FILE_ARGUMENT,
    seed: Optional[int] = typer.Option(None, "--seed", help="随机种子，默认使用配置中的 shuffle_seed"),
):
    """打乱顺序"""
    data = load_collection(source)
    rng = random.Random(seed if seed is not None else app_settings.shuffle_seed)
    emit("shuffle", run_operation("shuffle", lambda: iteration.shuffle(data, rng)))


@app.command()
def reduce(
    source: Path = FILE_ARGUMENT,
    op: ReduceOp = typer.Option(ReduceOp.SUM, "--op", help="二元运算"),
    initial: Optional[str] = typer.Option(None, "--initial", help="初始值（按 YAML 标量解析）"),
):
    """用二元运算折叠集合"""
    data = load_collection(source)
    reducer = _REDUCERS[op]
    if initial is None:
        result = run_operation("reduce", lambda: iteration.reduce(data, reducer))
    else:
        seed = parse_value(initial)
        result = run_operation("reduce", lambda: iteration.reduce(data, reducer, seed))
    emit("reduce", result)


@app.command()
def every(source: Path = FILE_ARGUMENT):
    """所有元素是否为真值"""
    data = load_collection(source)
    emit("every", run_operation("every", lambda: iteration.every(data, bool)))


@app.command()
def some(source: Path = FILE_ARGUMENT):
    """是否存在真值元素"""
    data = load_collection(source)
    emit("some", run_operation("some", lambda: iteration.some(data)))


if __name__ == "__main__":
    app()
