"""CLI — 发布命令"""

from __future__ import annotations

import click

from aether.cli import _fail
from aether.core.exceptions import AetherError, ConflictError
from aether.core.project import PACKAGE_CONFIG_FILENAME, dump_manifest
from aether.core.publisher import list_files
from aether.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(publish)


def _ensure_package_manifest(svc: ServiceContainer, yes: bool) -> bool:
    """缺少 package.aether.json 时根据 aether.json 创建，用户拒绝返回 False"""
    if svc.project.has_package_manifest():
        return True

    click.echo(f"未找到 {PACKAGE_CONFIG_FILENAME}")
    if not yes and not click.confirm(f"根据 aether.json 创建 {PACKAGE_CONFIG_FILENAME}?", default=True):
        return False

    config = svc.project.read_config()
    author = str(config.extra.get("author", ""))
    repository = str(config.extra.get("repository", ""))
    main = "src/index.js"
    if not yes:
        author = click.prompt("包作者", default=author, show_default=bool(author))
        repository = click.prompt("仓库地址", default=repository, show_default=bool(repository))
        main = click.prompt("入口文件", default=main)
    svc.publisher.create_package_manifest(author, repository, main)
    click.echo(f"已创建 {PACKAGE_CONFIG_FILENAME}")
    return True


@click.command()
@click.option("--dry-run", is_flag=True, help="只显示将要发布的内容，不实际发布")
@click.option("--yes", "-y", is_flag=True, help="跳过所有确认（同版本直接覆盖）")
@click.pass_obj
def publish(svc: ServiceContainer, dry_run: bool, yes: bool) -> None:
    """发布当前包到注册表"""
    if not svc.project.is_project():
        raise click.ClickException("当前目录不是 Aether 项目，请先执行 'apm init'")

    pub = svc.publisher
    try:
        if not _ensure_package_manifest(svc, yes):
            return
        manifest = pub.load_manifest()

        if not manifest.repository:
            click.echo("警告: 未指定仓库地址，建议填写，否则无法从注册表安装")
            if not yes:
                repo = click.prompt("仓库地址（留空跳过）", default="", show_default=False)
                if repo.strip():
                    pub.set_repository(manifest, repo.strip())

        overwrite = False
        try:
            pub.check_existing(manifest)
        except ConflictError as e:
            click.echo(f"警告: {e}")
            if not yes and not click.confirm("是否覆盖?", default=False):
                click.echo("已取消发布")
                return
            overwrite = True

        click.echo("=== 待发布文件 ===")
        for f in list_files(svc.project.root):
            click.echo(f"  {f}")

        if dry_run:
            click.echo(dump_manifest(manifest))
            click.echo("Dry run: 未发布")
            return

        if not yes and not click.confirm(f"发布 {manifest.name}@{manifest.version}?", default=True):
            click.echo("已取消发布")
            return

        entry = pub.publish(manifest, overwrite=overwrite)
    except AetherError as e:
        raise _fail(e) from e

    click.echo(f"已发布 {entry.name}@{entry.version}")
    click.echo(f"现在可以使用 'apm install {entry.name}' 安装")
