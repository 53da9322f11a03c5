"""CLI — 安装命令"""

from __future__ import annotations

import click

from aether.cli import _fail
from aether.core.exceptions import AetherError, PackageNotFoundError
from aether.core.models import InstallReport
from aether.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(install)


def _echo_report(report: InstallReport) -> None:
    for item in report.installed:
        click.echo(f"  + {item}")
    for name, err in report.failed.items():
        click.echo(f"  x {name}: {err}", err=True)
    if report.success:
        click.echo("全部安装完成")
    else:
        click.echo(report.summary())


@click.command()
@click.argument("package", required=False)
@click.option("--dev", "-D", is_flag=True, help="作为开发依赖安装")
@click.option("--global", "-g", "is_global", is_flag=True, help="全局安装（不写项目清单）")
@click.pass_obj
def install(svc: ServiceContainer, package: str | None, dev: bool, is_global: bool) -> None:
    """从注册表或 GitHub 仓库安装包；不指定包名则安装项目全部依赖"""
    if not is_global and not svc.project.is_project():
        raise click.ClickException("当前目录不是 Aether 项目，请先执行 'apm init'")
    if is_global and not package:
        raise click.UsageError("全局安装必须指定包名")

    try:
        if not package:
            report = svc.installer.install_all()
        elif is_global:
            report = svc.global_installer.install(package, save=False)
        else:
            report = svc.installer.install(package, dev=dev)
    except PackageNotFoundError as e:
        raise click.ClickException(
            f"{e}\n如需从 GitHub 安装，请使用 'apm install user/repo' "
            "或 'apm install https://github.com/user/repo'",
        ) from e
    except AetherError as e:
        raise _fail(e) from e

    _echo_report(report)
