"""CLI — 启动打包服务"""

from __future__ import annotations

import click


def register(group: click.Group) -> None:
    group.add_command(server)


@click.command()
@click.option("--host", default="127.0.0.1", help="监听地址")
@click.option("--port", default=8888, help="监听端口")
def server(host: str, port: int) -> None:
    """启动 Web 服务，按请求实时打包 Jimfile"""
    from jim.web.app import run_server
    run_server(host=host, port=port)
