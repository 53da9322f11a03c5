"""apm 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
服务容器挂在 click 上下文 obj 上，测试可通过 CliRunner.invoke(obj=...) 注入。
"""

import logging
import os

import click

from aether import __version__
from aether.core.exceptions import AetherError
from aether.utils.logger import log_environment_info, setup_logging

logger = logging.getLogger(__name__)


def _fail(exc: AetherError) -> click.ClickException:
    """业务异常转为 click 异常（stderr 输出，退出码 1）"""
    details = getattr(exc, "details", None)
    message = str(exc)
    if details:
        message += "\n" + "\n".join(f"  - {d}" for d in details)
    return click.ClickException(message)


@click.group()
@click.version_option(version=__version__, prog_name="apm")
@click.pass_context
def main(ctx: click.Context) -> None:
    """Aether Packet Manager - Aether 框架包管理工具"""
    debug = bool(os.getenv("DEBUG"))
    setup_logging(
        level="DEBUG" if debug else os.getenv("APM_LOG_LEVEL", "INFO"),
        json_output=os.getenv("APM_LOG_JSON", "") == "1",
    )
    if debug:
        log_environment_info(logger)

    if ctx.obj is None:
        from aether.core.config import init_config
        from aether.services.container import ServiceContainer
        ctx.obj = ServiceContainer(config=init_config(), project_dir=os.getcwd())


# 注册各领域子命令
from aether.cli.cmd_help import register as _reg_help  # noqa: E402
from aether.cli.cmd_init import register as _reg_init  # noqa: E402
from aether.cli.cmd_install import register as _reg_install  # noqa: E402
from aether.cli.cmd_list import register as _reg_list  # noqa: E402
from aether.cli.cmd_publish import register as _reg_publish  # noqa: E402

_reg_init(main)
_reg_install(main)
_reg_publish(main)
_reg_list(main)
_reg_help(main)
