"""CLI — 帮助命令（apm help [command]）"""

from __future__ import annotations

import click


def register(group: click.Group) -> None:
    group.add_command(help_command, name="help")


@click.command()
@click.argument("command", required=False)
@click.pass_context
def help_command(ctx: click.Context, command: str | None) -> None:
    """显示总体帮助或指定命令的帮助"""
    parent = ctx.parent
    group = parent.command
    if not command:
        click.echo(parent.get_help())
        return

    sub = group.get_command(parent, command) if isinstance(group, click.Group) else None
    if sub is None:
        click.echo(f"未知命令: {command}", err=True)
        click.echo(parent.get_help())
        ctx.exit(1)

    with click.Context(sub, info_name=command, parent=parent) as sub_ctx:
        click.echo(sub.get_help(sub_ctx))
