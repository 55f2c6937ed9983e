"""jim 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
全局选项（--jimhome / --jimfile / --force / --stdout）在 main 中解析，
通过 click 上下文对象传给各命令。
"""

import os
from dataclasses import dataclass
from typing import Any

import click

from jim import __version__
from jim.core.exceptions import AlreadyExistsError, JimError
from jim.services.container import get_container, reset_container
from jim.utils.logger import set_level, setup_logging


@dataclass
class CliState:
    force: bool = False
    stdout: bool = False


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


class JimGroup(click.Group):
    """把 JimError 转换为一行错误提示 + 退出码 1"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except AlreadyExistsError as e:
            raise click.ClickException(f"{e}，已中止。确认无误请使用 --force") from e
        except JimError as e:
            raise click.ClickException(f"{e} ({e.code})") from e


@click.group(cls=JimGroup)
@click.version_option(version=__version__, prog_name="jim")
@click.option("--config", "config_path", default="jim.yml", help="配置文件路径")
@click.option("--jimhome", default=None, help="安装目录 JIMHOME（默认 $JIMHOME 或 ~/.jim）")
@click.option("-j", "--jimfile", default=None, help="Jimfile 路径（默认 ./Jimfile）")
@click.option("-f", "--force", is_flag=True, help="强制创建/覆盖文件")
@click.option("-d", "--debug", is_flag=True, help="日志级别设为 DEBUG")
@click.option("-o", "--stdout", is_flag=True, help="bundle/compress 结果输出到 STDOUT")
@click.pass_context
def main(
    ctx: click.Context, config_path: str, jimhome: str | None,
    jimfile: str | None, force: bool, debug: bool, stdout: bool,
) -> None:
    """jim - 前端脚本库依赖管理与打包工具"""
    setup_logging(
        level=os.getenv("JIM_LOG_LEVEL", "INFO"),
        json_output=os.getenv("JIM_LOG_JSON", "") == "1",
    )
    if debug:
        set_level("DEBUG")
    elif stdout:
        set_level("ERROR")

    from jim.core.config import init_config
    cfg = init_config(config_path)
    if jimhome:
        cfg.jimhome = jimhome
    if jimfile:
        cfg.jimfile = jimfile
    reset_container()
    ctx.obj = CliState(force=force, stdout=stdout)


# 注册各领域子命令
from jim.cli.cmd_install import register as _reg_install  # noqa: E402
from jim.cli.cmd_index import register as _reg_index  # noqa: E402
from jim.cli.cmd_bundle import register as _reg_bundle  # noqa: E402
from jim.cli.cmd_server import register as _reg_server  # noqa: E402

_reg_install(main)
_reg_index(main)
_reg_bundle(main)
_reg_server(main)
