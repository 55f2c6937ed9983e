"""CLI — 解析、打包、压缩、vendor"""

from __future__ import annotations

import logging

import click

from jim.cli import CliState, _svc

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(resolve)
    group.add_command(bundle)
    group.add_command(compress)
    group.add_command(vendor)
    group.add_command(pack)


def _emit(result: object) -> None:
    """打包结果是字符串时（没有目标路径）直接输出"""
    if isinstance(result, str):
        click.echo(result)


@click.command()
def resolve() -> None:
    """列出 Jimfile 中每个需求解析到的文件"""
    result = _svc().bundler.resolve()
    click.echo("文件:")
    for resolved in result:
        req = resolved.requirement
        click.echo(f"{resolved.path} | {req.name} | {resolved.version or req.version or ''}")


@click.command()
@click.argument("dest", required=False)
@click.pass_obj
def bundle(state: CliState, dest: str | None) -> None:
    """按 Jimfile 拼接文件到 DEST"""
    target = click.get_text_stream("stdout") if state.stdout else dest
    _emit(_svc().bundler.bundle(target))


@click.command()
@click.argument("dest", required=False)
@click.pass_obj
def compress(state: CliState, dest: str | None) -> None:
    """按 Jimfile 压缩并拼接文件到 DEST"""
    target = click.get_text_stream("stdout") if state.stdout else dest
    _emit(_svc().bundler.compress(target))


@click.command()
@click.argument("directory", required=False)
@click.pass_obj
def vendor(state: CliState, directory: str | None) -> None:
    """把 Jimfile 解析到的文件复制到 DIRECTORY"""
    copied = _svc().bundler.vendor(directory, force=state.force)
    for path in copied:
        click.echo(f"已复制: {path}")


@click.command()
@click.argument("directory", required=False)
@click.pass_context
def pack(ctx: click.Context, directory: str | None) -> None:
    """vendor 到 DIRECTORY，然后 bundle 和 compress"""
    logger.info("打包当前项目的 Jimfile")
    ctx.invoke(vendor, directory=directory)
    ctx.invoke(bundle, dest=None)
    ctx.invoke(compress, dest=None)
