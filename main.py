#!/usr/bin/env python3
"""
confstore - 键值配置存储命令行工具

对绑定的 JSON 配置文件执行查询、写入、删除、导入导出操作
"""

import sys
import json
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

import click
from loguru import logger
from rich.console import Console
from rich.table import Table

from confstore import __version__
from confstore.config import SettingsManager
from confstore.store import Configuration, ConfigStoreError
from confstore.utils import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="confstore")
@click.option('--file', '-f', 'file_name', type=click.Path(dir_okay=False),
              help='配置存储文件（默认取设置中的 store.default_file）')
@click.option('--config-dir', default='config', show_default=True, help='设置文件目录')
@click.pass_context
def cli(ctx: click.Context, file_name: str, config_dir: str):
    """🗂️ confstore - 键值配置存储

    内存键值配置，支持 JSON 导入导出和文件持久化
    """
    setup_logging()

    try:
        settings = SettingsManager(config_dir=config_dir)
    except ConfigStoreError as e:
        console.print(f"[bold red]❌ 设置加载失败: {e}[/bold red]")
        sys.exit(1)

    errors = [msg for section in settings.validate_config().values() for msg in section]
    if errors:
        console.print(f"[bold red]❌ 设置校验失败: {'; '.join(errors)}[/bold red]")
        sys.exit(1)

    setup_logging(settings.logging)

    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings
    ctx.obj['file_name'] = file_name or settings.store.default_file


def open_store(ctx: click.Context, must_exist: bool = True) -> Configuration:
    """按命令行参数创建配置存储并加载已有文件"""
    settings: SettingsManager = ctx.obj['settings']
    store = Configuration(ctx.obj['file_name'], options=settings.serialization_options())

    if Path(store.file_name).exists():
        store.load()
    elif must_exist:
        raise FileNotFoundError(f"配置文件不存在: {store.file_name}")
    else:
        Path(store.file_name).parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"配置文件不存在，使用空存储: {store.file_name}")

    return store


def parse_value(raw: str):
    """按 JSON 解析命令行值，解析失败时保留为字符串"""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def fail(action: str, error: Exception) -> None:
    logger.error(f"{action}失败: {error}")
    console.print(f"[bold red]❌ {action}失败: {error}[/bold red]")
    sys.exit(1)


@cli.command()
@click.pass_context
def init(ctx: click.Context):
    """🔧 创建默认设置文件"""
    settings: SettingsManager = ctx.obj['settings']

    if settings.settings_file.exists():
        console.print(f"[yellow]⚠️ 设置文件已存在: {settings.settings_file}[/yellow]")
        return

    try:
        path = settings.create_default_settings()
    except (ConfigStoreError, OSError) as e:
        fail("初始化", e)

    console.print(f"[bold green]✅ 已创建默认设置: {path}[/bold green]")


@cli.command()
@click.pass_context
def show(ctx: click.Context):
    """📋 显示所有配置项"""
    try:
        store = open_store(ctx)
    except (ConfigStoreError, OSError) as e:
        fail("读取配置", e)

    display_entries(store)


@cli.command()
@click.argument('key')
@click.pass_context
def get(ctx: click.Context, key: str):
    """🔍 查询配置项"""
    try:
        store = open_store(ctx)
    except (ConfigStoreError, OSError) as e:
        fail("读取配置", e)

    value, found = store.get_value(key)
    if not found:
        console.print(f"[yellow]⚠️ 配置项不存在: {key}[/yellow]")
        sys.exit(1)

    click.echo(json.dumps(value, ensure_ascii=False))


@cli.command(name='set')
@click.argument('key')
@click.argument('value')
@click.option('--force', is_flag=True, help='已存在时先删除再写入')
@click.pass_context
def set_value(ctx: click.Context, key: str, value: str, force: bool):
    """✏️ 写入配置项（默认不覆盖已有值）"""
    try:
        store = open_store(ctx, must_exist=False)

        if force:
            store.delete(key)

        if not store.set_value(key, parse_value(value)):
            console.print(f"[yellow]⚠️ 配置项已存在，未覆盖: {key}（使用 --force 覆盖）[/yellow]")
            sys.exit(1)

        store.save()
    except (ConfigStoreError, OSError) as e:
        fail("写入配置", e)

    console.print(f"[green]✅ 已写入: {key}[/green]")


@cli.command()
@click.argument('key')
@click.pass_context
def delete(ctx: click.Context, key: str):
    """🗑️ 删除配置项"""
    try:
        store = open_store(ctx)

        if not store.delete(key):
            console.print(f"[yellow]⚠️ 配置项不存在: {key}[/yellow]")
            sys.exit(1)

        store.save()
    except (ConfigStoreError, OSError) as e:
        fail("删除配置", e)

    console.print(f"[green]✅ 已删除: {key}[/green]")


@cli.command()
@click.confirmation_option(prompt='确定清空所有配置项？')
@click.pass_context
def clear(ctx: click.Context):
    """🧹 清空所有配置项"""
    try:
        store = open_store(ctx, must_exist=False)
        store.clear()
        store.save()
    except (ConfigStoreError, OSError) as e:
        fail("清空配置", e)

    console.print("[green]✅ 配置已清空[/green]")


@cli.command(name='export')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='导出到文件，缺省输出到终端')
@click.pass_context
def export_config(ctx: click.Context, output: str):
    """📤 导出为 JSON"""
    try:
        store = open_store(ctx)

        if output:
            store.save_to_file(output)
            console.print(f"[green]📄 已导出: {output}[/green]")
        else:
            click.echo(store.to_json())
    except (ConfigStoreError, OSError) as e:
        fail("导出配置", e)


@cli.command(name='import')
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_config(ctx: click.Context, source: str):
    """📥 从 JSON 文件导入（整体替换当前配置）"""
    try:
        store = open_store(ctx, must_exist=False)
        store.load_from_file(source)
        store.save()
    except (ConfigStoreError, OSError) as e:
        fail("导入配置", e)

    console.print(f"[green]✅ 已导入 {len(store)} 项: {source}[/green]")


def display_entries(store: Configuration):
    """显示配置项表格"""
    table = Table(title=f"🗂️ {store.file_name}")

    table.add_column("键", style="cyan")
    table.add_column("值", style="magenta")
    table.add_column("类型", style="dim")

    for key in sorted(store.keys()):
        value, _ = store.get_value(key)
        table.add_row(key, json.dumps(value, ensure_ascii=False), type(value).__name__)

    console.print(table)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️ 用户中断操作[/yellow]")
        sys.exit(0)
