"""CLI — 列表命令（list / ls）"""

from __future__ import annotations

import json

import click

from aether.cli import _fail
from aether.core.exceptions import AetherError
from aether.core.listing import group_registry, installed_packages
from aether.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(list_packages, name="list")
    group.add_command(list_packages, name="ls")


def _list_installed(svc: ServiceContainer, as_json: bool) -> None:
    if not svc.project.is_project():
        raise click.ClickException("当前目录不是 Aether 项目，请先执行 'apm init'")
    config = svc.project.read_config()
    rows = installed_packages(config)
    if as_json:
        click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return
    if not rows:
        click.echo("没有已安装的包")
        return

    click.echo(f"=== {config.name} 已安装的包 ===")
    for label, kind in (("Dependencies", "dependency"), ("Dev Dependencies", "devDependency")):
        items = [r for r in rows if r["type"] == kind]
        if items:
            click.echo(f"\n{label}:")
            for r in items:
                click.echo(f"  {r['name']}@{r['version']}")


def _list_registry(svc: ServiceContainer, as_json: bool) -> None:
    entries = svc.registry.get_packages()
    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False))
        return
    if not entries:
        click.echo("注册表中没有可用的包")
        return

    click.echo("=== 注册表中的可用包 ===")
    for name, versions in group_registry(entries).items():
        latest = versions[-1]
        click.echo(f"{name} - {latest.description or '无描述'}")
        if len(versions) > 1:
            click.echo(f"  可用版本: {', '.join(v.version for v in versions)}")
        else:
            click.echo(f"  版本: {latest.version}")
        if latest.author:
            click.echo(f"  作者: {latest.author}")
        if latest.repository:
            click.echo(f"  仓库: {latest.repository}")


@click.command()
@click.option("--all", "-a", "show_all", is_flag=True, help="显示注册表中的全部包")
@click.option("--json", "-j", "as_json", is_flag=True, help="以 JSON 输出")
@click.pass_obj
def list_packages(svc: ServiceContainer, show_all: bool, as_json: bool) -> None:
    """列出已安装的包或注册表中的包"""
    try:
        if show_all:
            _list_registry(svc, as_json)
        else:
            _list_installed(svc, as_json)
    except AetherError as e:
        raise _fail(e) from e
