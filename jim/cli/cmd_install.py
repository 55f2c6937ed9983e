"""CLI — 初始化、安装、删除"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from jim.cli import CliState, _svc
from jim.core.exceptions import AlreadyExistsError
from jim.core.jimfile import JIMFILE_TEMPLATE

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(init)
    group.add_command(install)
    group.add_command(remove)
    group.add_command(remove, name="uninstall")


@click.command()
@click.argument("directory", default="")
@click.pass_obj
def init(state: CliState, directory: str) -> None:
    """在当前（或指定）目录生成 Jimfile"""
    path = Path(directory or ".") / "Jimfile"
    if path.exists() and not state.force:
        raise AlreadyExistsError(f"{path} 已存在", paths=[str(path)])
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(JIMFILE_TEMPLATE, encoding="utf-8")
    logger.info("已生成 Jimfile: %s", path)


@click.command()
@click.argument("url")
@click.argument("name", required=False)
@click.argument("version", required=False)
@click.pass_obj
def install(state: CliState, url: str, name: str | None, version: str | None) -> None:
    """把 URL / 文件 / 归档 / 目录安装到 JIMHOME"""
    installer = _svc().installer(url, force=state.force, name=name, version=version)
    paths = installer.install()
    for p in installer.report.installed:
        click.echo(f"已安装: {p}")
    for failed in installer.report.failed:
        click.echo(f"已存在且内容不同: {failed.target}（使用 --force 覆盖）", err=True)
    if paths is False:
        raise SystemExit(1)


@click.command()
@click.argument("name")
@click.argument("version", required=False)
@click.option("--yes", "-y", is_flag=True, help="不逐个确认，直接删除")
def remove(name: str, version: str | None, yes: bool) -> None:
    """删除已安装的包（逐个确认）"""
    from jim.core.pkg.installer import delete

    logger.info("查找匹配的已安装包: %s %s", name, version or "")
    index = _svc().installed_index
    paths = index.find_all(name, version)
    if not paths:
        click.echo("没有匹配的已安装包。")
        return

    click.echo(f"找到 {len(paths)} 个匹配项")
    removed = 0
    for path in paths:
        # 指向存储目录之外的链接条目只跳过，不删除其目标
        if path.is_symlink() or not index.in_store(path):
            click.echo(f"不在存储目录内，跳过 {path}")
            continue
        if yes or click.confirm(f"删除 {path}?", default=False):
            delete(path)
            removed += 1
        else:
            click.echo(f"跳过 {path}")
    click.echo(f"已删除 {removed} 个。")
