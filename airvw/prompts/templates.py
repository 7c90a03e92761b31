"""LangChain 提示词模板"""

from collections.abc import Mapping

from langchain_core.prompts import PromptTemplate

from ..models.review_result import SeverityLevel

# 模型在没有发现问题时必须原样输出的内容
NO_ISSUES_SENTINEL = "✅ 未发现任何问题"

FINDING_FORMAT = "[等级] 文件名:行号 - 问题描述 - 修复建议"

REVIEW_TEMPLATE = """
你是资深{role}工程师，仅评审Codeup MR中新增/修改的{display_name}代码，严格按以下要求输出：
1. 评审维度：{dimensions}；
2. 每个问题必须标注等级，等级仅能是[{levels}]，其中[{block}]级问题直接阻断MR合并；
3. 输出格式：每行一个问题，格式为「{finding_format}」；
4. 仅输出问题列表，无冗余前言/结语，无代码块，每行一条；
5. 若无问题，仅输出「{sentinel}」。

待评审的MR变更代码-
---------------------
{review_content}"""

FILE_SECTION = "=== 文件：{file} ===\n规则检查结果：{lint}\n代码变更内容：\n{diff}\n\n"

review_prompt = PromptTemplate.from_template(REVIEW_TEMPLATE).partial(
    levels="/".join(level.value for level in SeverityLevel),
    block=SeverityLevel.BLOCK.value,
    finding_format=FINDING_FORMAT,
    sentinel=NO_ISSUES_SENTINEL,
)


def build_review_content(
    diff_files: Mapping[str, str], lint_results: Mapping[str, str]
) -> str:
    """把每个文件的规则检查结果和 diff 拼成评审内容"""
    return "".join(
        FILE_SECTION.format(file=file_path, lint=lint_results.get(file_path, ""), diff=diff)
        for file_path, diff in diff_files.items()
    )


def build_prompt(
    role: str,
    display_name: str,
    dimensions: tuple[str, ...],
    diff_files: Mapping[str, str],
    lint_results: Mapping[str, str],
) -> str:
    """生成指定语言的评审 prompt

    Args:
        role: 评审者身份，如 Golang
        display_name: 代码语言名称，如 Go
        dimensions: 评审维度
        diff_files: 待评审文件（路径 -> diff）
        lint_results: 规则检查结果（路径 -> 说明）

    Returns:
        完整的 prompt 文本
    """
    return review_prompt.format(
        role=role,
        display_name=display_name,
        dimensions="、".join(dimensions),
        review_content=build_review_content(diff_files, lint_results),
    )
