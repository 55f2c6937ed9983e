"""CLI — 已安装 / 可用包列表"""

from __future__ import annotations

import logging

import click

from jim.cli import _svc
from jim.core.pkg.index import Index

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(list_installed)
    group.add_command(list_installed, name="installed")
    group.add_command(available)


def _print_versions(index: Index, search: str | None) -> None:
    listing = index.list(search)
    if not listing:
        click.echo("  （无）")
        return
    for name, versions in listing.items():
        click.echo(f"{name} ({', '.join(v for v, _ in versions)})")


@click.command(name="list")
@click.argument("search", required=False)
def list_installed(search: str | None) -> None:
    """列出已安装的包和版本"""
    index = _svc().installed_index
    logger.info("已安装文件目录: %s", ":".join(str(d) for d in index.directories))
    if search:
        logger.info("搜索 '%s'", search)
    click.echo("已安装:")
    _print_versions(index, search)


@click.command()
@click.argument("search", required=False)
def available(search: str | None) -> None:
    """列出所有可用的包（安装目录 + 项目本地路径）"""
    index = _svc().index
    logger.info("可用文件目录:\n%s", "\n".join(str(d) for d in index.directories))
    if search:
        logger.info("搜索 '%s'", search)
    click.echo("可用:")
    _print_versions(index, search)
