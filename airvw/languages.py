"""评审语言策略

每种语言携带自己的文件后缀、评审维度和静态检查工具，
通过 :func:`get_strategy` 按配置选择，未知语言回退到 Golang。
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .diff_filter import filter_files
from .lint import LintRecipe, run_lint
from .models.review_result import ChangedFile
from .prompts.templates import build_prompt

logger = logging.getLogger(__name__)


class Language(str, Enum):
    """支持的评审语言"""

    GOLANG = "golang"
    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"


@dataclass(frozen=True)
class LanguageStrategy:
    """单个语言的评审策略"""

    language: Language
    file_extension: str
    role: str
    display_name: str
    dimensions: tuple[str, ...]
    lint: LintRecipe

    def extension(self) -> str:
        return self.file_extension

    def select_files(self, changed_files: Iterable[ChangedFile]) -> dict[str, str]:
        return filter_files(changed_files, self.file_extension)

    def build_prompt(
        self, diff_files: Mapping[str, str], lint_results: Mapping[str, str]
    ) -> str:
        return build_prompt(
            role=self.role,
            display_name=self.display_name,
            dimensions=self.dimensions,
            diff_files=diff_files,
            lint_results=lint_results,
        )

    def run_lint(
        self, working_dir: str | Path, diff_files: Mapping[str, str]
    ) -> dict[str, str]:
        return run_lint(self.lint, working_dir, diff_files)


STRATEGIES: dict[Language, LanguageStrategy] = {
    Language.GOLANG: LanguageStrategy(
        language=Language.GOLANG,
        file_extension=".go",
        role="Golang",
        display_name="Go",
        dimensions=(
            "并发安全", "Error处理", "内存优化", "代码规范", "逻辑漏洞",
            "性能问题", "内存泄漏", "竞态检查", "空指针解引用", "内存溢出",
        ),
        lint=LintRecipe("golangci-lint", ("run", "--new-from-rev=origin/main", "{file}")),
    ),
    Language.JAVA: LanguageStrategy(
        language=Language.JAVA,
        file_extension=".java",
        role="Java",
        display_name="Java",
        dimensions=(
            "并发安全", "异常处理", "内存优化", "代码规范", "逻辑漏洞",
            "性能问题", "资源泄漏", "空指针异常", "集合使用", "线程安全",
        ),
        lint=LintRecipe("checkstyle", ("-c", "/google_checks.xml", "{file}")),
    ),
    Language.PYTHON: LanguageStrategy(
        language=Language.PYTHON,
        file_extension=".py",
        role="Python",
        display_name="Python",
        dimensions=(
            "异常处理", "代码规范(PEP8)", "逻辑漏洞", "性能问题",
            "资源泄漏", "类型注解", "导入管理", "文档字符串",
        ),
        lint=LintRecipe("flake8"),
    ),
    Language.JAVASCRIPT: LanguageStrategy(
        language=Language.JAVASCRIPT,
        file_extension=".js",
        role="JavaScript",
        display_name="JavaScript",
        dimensions=(
            "异步编程", "错误处理", "代码规范(ESLint)", "逻辑漏洞", "性能问题",
            "内存泄漏", "DOM操作", "事件处理", "跨浏览器兼容性",
        ),
        lint=LintRecipe("eslint"),
    ),
}

# 语言别名（小写）
_ALIASES = {
    "golang": Language.GOLANG,
    "go": Language.GOLANG,
    "java": Language.JAVA,
    "python": Language.PYTHON,
    "javascript": Language.JAVASCRIPT,
    "js": Language.JAVASCRIPT,
}


def resolve_language(key: str | None) -> Language:
    """解析语言配置，大小写不敏感，空值或未知值回退到 Golang"""
    language = _ALIASES.get((key or "").strip().lower())
    if language is None:
        if key:
            logger.debug(f"未知的评审语言 {key!r}，使用 golang")
        return Language.GOLANG
    return language


def get_strategy(key: str | None) -> LanguageStrategy:
    """根据语言获取对应的评审策略"""
    return STRATEGIES[resolve_language(key)]
