"""规则检查（外部静态检查工具）适配"""

import logging
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

LINT_PREFIX = "【规则检查】"
NO_ISSUES_NOTICE = f"{LINT_PREFIX}未发现违规问题"


@dataclass(frozen=True)
class LintRecipe:
    """静态检查工具的调用方式

    Attributes:
        tool: 可执行文件名，执行前先探测是否存在
        args: 参数模板，``{file}`` 会替换为待检查的文件路径
    """

    tool: str
    args: tuple[str, ...] = ("{file}",)

    def command(self, file_path: str) -> list[str]:
        return [self.tool] + [arg.format(file=file_path) for arg in self.args]


def missing_tool_notice(tool: str) -> str:
    return f"{LINT_PREFIX}未执行：缺少{tool}环境"


def run_lint(
    recipe: LintRecipe, working_dir: str | Path, diff_files: Mapping[str, str]
) -> dict[str, str]:
    """对每个待评审文件执行一次静态检查

    工具不存在时所有文件都记录"未执行"，不会尝试调用；
    单个文件执行失败只影响该文件。

    Args:
        recipe: 工具调用方式
        working_dir: 仓库目录
        diff_files: 待评审文件（路径 -> diff）

    Returns:
        路径 -> 检查结果说明
    """
    logger.debug("=" * 80)
    logger.debug(f"【规则检查】{recipe.tool} 开始执行")
    logger.debug(f"仓库路径: {working_dir}, 待检查文件数: {len(diff_files)}")

    lint_results: dict[str, str] = {}

    if shutil.which(recipe.tool) is None:
        logger.debug(f"未检测到 {recipe.tool}，跳过规则检查")
        for file_path in diff_files:
            lint_results[file_path] = missing_tool_notice(recipe.tool)
        return lint_results

    for file_path in diff_files:
        logger.debug(f"检查文件: {file_path}")
        try:
            proc = subprocess.run(
                recipe.command(file_path),
                cwd=working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.debug(f"文件 {file_path} 检查失败: {e}")
            lint_results[file_path] = f"{LINT_PREFIX}执行失败：{e}，输出："
            continue

        output = proc.stdout or ""
        if proc.returncode != 0:
            logger.debug(f"文件 {file_path} 检查失败: exit status {proc.returncode}")
            lint_results[file_path] = (
                f"{LINT_PREFIX}执行失败：exit status {proc.returncode}，输出：{output}"
            )
        elif output == "":
            lint_results[file_path] = NO_ISSUES_NOTICE
        else:
            logger.debug(f"文件 {file_path} 发现违规问题: {output}")
            lint_results[file_path] = f"{LINT_PREFIX}发现问题：{output}"

    return lint_results
