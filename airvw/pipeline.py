"""评审流程编排

顺序执行：拉取变更 -> 过滤 -> 规则检查 -> AI 评审 -> 评论 -> 阻断决策。
拉取变更和 AI 评审失败直接抛出异常终止流程；评论失败只记录警告。
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from langchain_core.runnables import Runnable

from .chains.review_chain import create_review_chain
from .codeup import CodeupClient, mask_sensitive
from .errors import CommentError
from .languages import LanguageStrategy, get_strategy
from .models.config import ReviewerConfig
from .models.review_result import ClassifiedFindings, ReviewOutcome
from .policy import STATUS_SUCCESS, decide_from_response
from .report import build_comment_body

logger = logging.getLogger(__name__)


def setup_debug_logging(
    verbose: bool = False, log_file: str | None = None
) -> list[logging.Handler]:
    """设置调试日志

    Args:
        verbose: 是否输出到控制台
        log_file: 日志文件路径（可选）

    Returns:
        本次添加的 handler，评审结束后交给 teardown_debug_logging 移除
    """
    package_logger = logging.getLogger("airvw")
    handlers: list[logging.Handler] = []

    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter("[DEBUG] %(message)s"))
        handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
        handlers.append(file_handler)

    package_logger.setLevel(logging.DEBUG if handlers else logging.WARNING)
    for handler in handlers:
        package_logger.addHandler(handler)
    return handlers


def teardown_debug_logging(handlers: list[logging.Handler]) -> None:
    """移除并关闭 setup_debug_logging 添加的 handler"""
    package_logger = logging.getLogger("airvw")
    for handler in handlers:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@dataclass
class PipelineResult:
    """一次评审的结果"""

    strategy: LanguageStrategy
    outcome: ReviewOutcome
    reviewed_files: list[str] = field(default_factory=list)
    review_text: str = ""
    warnings: list[str] = field(default_factory=list)


def run_review(
    config: ReviewerConfig,
    codeup: CodeupClient | None = None,
    chain: Runnable[dict[str, Any], ClassifiedFindings] | None = None,
) -> PipelineResult:
    """执行一次完整评审

    Args:
        config: 评审配置，其中 debug/log_file 决定日志输出
        codeup: Codeup 客户端，默认按配置创建
        chain: 评审链，默认按配置创建

    Returns:
        PipelineResult: 评审结果

    Raises:
        DiffFetchError: 拉取变更失败
        ReviewServiceError: AI 评审失败
    """
    handlers = setup_debug_logging(config.debug, config.log_file)
    owns_client = codeup is None
    if codeup is None:
        codeup = CodeupClient(config.codeup)

    try:
        _log_config(config)
        strategy = get_strategy(config.language)
        logger.debug(f"使用 {strategy.language.value} 语言评审流程")
        return _run_stages(config, strategy, codeup, chain)
    finally:
        if owns_client:
            codeup.close()
        teardown_debug_logging(handlers)


def _run_stages(
    config: ReviewerConfig,
    strategy: LanguageStrategy,
    codeup: CodeupClient,
    chain: Runnable[dict[str, Any], ClassifiedFindings] | None,
) -> PipelineResult:
    changed_files = codeup.get_compare_diffs(config.from_commit, config.to_commit)
    diff_files = strategy.select_files(changed_files)
    if not diff_files:
        logger.debug(f"未检测到新增/修改的{strategy.extension()}文件，无需评审")
        return PipelineResult(
            strategy=strategy,
            outcome=ReviewOutcome(
                status=STATUS_SUCCESS,
                message=f"无变更的{strategy.extension()}文件，评审通过",
            ),
        )
    logger.debug(f"共筛选出{len(diff_files)}个需评审的{strategy.extension()}文件")

    lint_results = strategy.run_lint(config.working_dir, diff_files)

    if chain is None:
        chain = create_review_chain(strategy, config.llm)
    findings = chain.invoke({"diff_files": diff_files, "lint_results": lint_results})

    warnings = []
    comment_error = _post_comment(codeup, config, findings.raw_text)
    if comment_error is not None:
        message = f"评论{config.comment_target}失败（不终止评审）：{comment_error}"
        logger.debug(message)
        warnings.append(message)

    return PipelineResult(
        strategy=strategy,
        outcome=decide_from_response(findings, config.level),
        reviewed_files=list(diff_files),
        review_text=findings.raw_text,
        warnings=warnings,
    )


def _post_comment(
    codeup: CodeupClient, config: ReviewerConfig, review_text: str
) -> CommentError | None:
    target = config.comment_target
    try:
        if target == "mr":
            codeup.comment_merge_request(
                config.mr_id, build_comment_body(config, review_text, target)
            )
        elif target == "commit":
            body = build_comment_body(config, review_text, target) if review_text else ""
            codeup.comment_commit(config.commit_id, body)
        else:
            logger.debug("未指定有效评论目标（mr/commit），跳过评论操作")
    except CommentError as e:
        return e
    return None


def _log_config(config: ReviewerConfig) -> None:
    logger.debug("=" * 80)
    logger.debug("【配置详情】")
    logger.debug("=" * 80)
    logger.debug(f"YunxiaoToken: {mask_sensitive(config.codeup.token)}")
    logger.debug(f"OrgID: {config.codeup.org_id}, RepoID: {config.codeup.repo_id}")
    logger.debug(f"MRID: {config.mr_id}, CommitID: {config.commit_id}")
    logger.debug(f"FromCommit: {config.from_commit}, ToCommit: {config.to_commit}")
    logger.debug(f"Domain: {config.codeup.domain}")
    logger.debug(f"BaichuanAPIKey: {mask_sensitive(config.llm.api_key)}")
    logger.debug(f"Model: {config.llm.model}, Base URL: {config.llm.base_url}")
    logger.debug(f"Level: {config.level}, CommentTarget: {config.comment_target}")
    logger.debug(f"Language: {config.language}")
