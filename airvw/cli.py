"""CLI 入口"""

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from .config import create_default_config, find_config_file, load_config
from .errors import AirvwError
from .models.review_result import ReviewOutcome
from .pipeline import PipelineResult, run_review
from .report import format_outcome


def print_outcome(outcome: ReviewOutcome, title: str):
    """以 JSON 格式输出评审结论"""
    click.echo()
    click.echo(f"======= ********** [{title}] ********** =======")
    click.echo(format_outcome(outcome))


def print_review_result(result: PipelineResult):
    """打印评审结果，返回退出码"""
    for warning in result.warnings:
        click.echo(click.style(f"[警告] {warning}", fg="yellow"), err=True)

    outcome = result.outcome
    if not result.reviewed_files:
        click.echo(click.style(f"[通过] {outcome.message}", fg="green"))
        return 0

    if not outcome.passed:
        print_outcome(outcome, "代码问题详情")
        click.echo(
            click.style(
                f"[拦截] 检测到{outcome.total_issues}个{outcome.block_reason}问题，终止流程",
                fg="red",
                bold=True,
            )
        )
        return 1

    # 评审通过时仍展示所有非阻塞问题
    if outcome.block_issues:
        print_outcome(outcome, "AI评审建议详情")
    click.echo(click.style("[通过] 所有评审完成，无阻断级问题，评审通过！", fg="green"))
    return 0


@click.group()
def cli():
    """airvw - AI 驱动的云效 Codeup 代码评审工具

    拉取 MR/Commit 的代码变更，执行静态检查，调用阿里云百炼评审，
    可将评审结果评论到 MR/Commit，阻断级问题直接终止流程。
    """
    pass


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
@click.option("--yunxiao-token", help="云效Token（x-yunxiao-token，必填）")
@click.option("--org-id", help="组织ID（必填）")
@click.option("--repo-id", type=int, help="仓库ID（必填）")
@click.option("--from-commit", help="源提交ID（必填）")
@click.option("--to-commit", help="目标提交ID（必填）")
@click.option("--baichuan-key", help="阿里云百炼API Key（必填）")
@click.option("--domain", help="云效域名（默认：openapi-rdc.aliyuncs.com）")
@click.option("--level", help="评审等级：block/high/medium/suggest（默认：block）")
@click.option("--comment-target", help="评论目标：mr/commit/空（不评论）")
@click.option("--mr-id", type=int, help="MR的ID（comment-target=mr时必填）")
@click.option("--commit-id", help="Commit的hash（comment-target=commit时必填）")
@click.option("--language", help="评审语言：golang/java/python/javascript（默认：golang）")
@click.option("--workdir", help="执行规则检查的仓库目录（默认：当前目录）")
@click.option("--debug", is_flag=True, help="开启调试日志")
def review(
    config: Optional[str],
    yunxiao_token: Optional[str],
    org_id: Optional[str],
    repo_id: Optional[int],
    from_commit: Optional[str],
    to_commit: Optional[str],
    baichuan_key: Optional[str],
    domain: Optional[str],
    level: Optional[str],
    comment_target: Optional[str],
    mr_id: Optional[int],
    commit_id: Optional[str],
    language: Optional[str],
    workdir: Optional[str],
    debug: bool,
):
    """执行代码评审"""
    overrides = {
        "codeup": {"token": yunxiao_token, "org_id": org_id, "repo_id": repo_id, "domain": domain},
        "llm": {"api_key": baichuan_key},
        "level": level,
        "comment_target": comment_target,
        "mr_id": mr_id,
        "commit_id": commit_id,
        "from_commit": from_commit,
        "to_commit": to_commit,
        "language": language,
        "working_dir": workdir,
        "debug": debug or None,
    }

    try:
        cfg = load_config(Path(config) if config else None, overrides=overrides)
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"[错误] 配置加载失败: {e}", fg="red"), err=True)
        sys.exit(1)

    missing = cfg.missing_params()
    if missing:
        click.echo(
            click.style(f"[错误] 缺少必填参数：{', '.join(missing)}", fg="red"), err=True
        )
        click.echo("\n运行 airvw review --help 查看参数说明。", err=True)
        sys.exit(1)

    click.echo("[AI 代码评审] 开始执行...")
    try:
        result = run_review(cfg)
    except AirvwError as e:
        click.echo(click.style(f"[错误] 评审失败: {e}", fg="red"), err=True)
        sys.exit(1)

    sys.exit(print_review_result(result))


@cli.command()
@click.option("--path", "-p", type=click.Path(), help="配置文件保存路径")
def init(path: Optional[str]):
    """初始化配置文件"""
    try:
        config_path = create_default_config(Path(path) if path else None)
    except FileExistsError as e:
        click.echo(click.style(f"[错误] {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style(f"[成功] 配置文件已创建: {config_path}", fg="green", bold=True))
    click.echo("\n请编辑配置文件，设置云效 Token、百炼 API Key 等信息。")


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
def check(config: Optional[str]):
    """检查配置是否正确"""
    config_path = Path(config) if config else find_config_file()
    if not config_path:
        click.echo(click.style("[错误] 未找到配置文件", fg="red"), err=True)
        click.echo("请运行: airvw init")
        sys.exit(1)

    try:
        cfg = load_config(config_path)
    except ValidationError as e:
        click.echo(click.style(f"[错误] 配置检查失败: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"配置文件: {config_path}")
    click.echo(f"模型: {cfg.llm.model}")
    click.echo(f"Base URL: {cfg.llm.base_url}")
    click.echo(f"评审语言: {cfg.language}")
    click.echo(f"评审等级: {cfg.level}")
    click.echo(click.style("[成功] 配置有效", fg="green"))


def main():
    """主入口点"""
    cli()


if __name__ == "__main__":
    main()
