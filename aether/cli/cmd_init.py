"""CLI — 项目初始化"""

from __future__ import annotations

import click

from aether.cli import _fail
from aether.core.exceptions import AetherError
from aether.core.project import CONFIG_FILENAME, default_project_name
from aether.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(init)


@click.command()
@click.option("--yes", "-y", is_flag=True, help="跳过提问，使用默认值")
@click.option("--force", is_flag=True, help="已存在 aether.json 时直接覆盖")
@click.pass_obj
def init(svc: ServiceContainer, yes: bool, force: bool) -> None:
    """初始化一个新的 Aether 包"""
    project = svc.project
    if project.is_project() and not force:
        if not click.confirm(f"{CONFIG_FILENAME} 已存在，是否覆盖?", default=False):
            click.echo("已取消初始化")
            return

    name = default_project_name(project.root)
    version = "0.1.0"
    description = f"Aether package for {name}"
    author = repository = ""
    if not yes:
        click.echo("=== 初始化新的 Aether 包 ===")
        name = click.prompt("包名", default=name)
        version = click.prompt("版本", default=version)
        description = click.prompt("描述", default=description)
        author = click.prompt("作者", default="", show_default=False)
        repository = click.prompt("仓库地址", default="", show_default=False)

    try:
        config = project.init_project(
            name.strip(), version.strip(), description,
            author=author.strip(), repository=repository.strip(),
        )
    except AetherError as e:
        raise _fail(e) from e

    click.echo(f"已初始化 Aether 包: {config.name}")
    click.echo("执行 'apm install <package>' 安装依赖")
