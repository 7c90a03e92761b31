"""评审结果解析器

模型按「[等级] 文件名:行号 - 问题描述 - 修复建议」逐行输出问题。
解析是尽力而为的：分拣只认四个标准等级标记，结构化解析失败时
整行作为 unknown 问题保留，不会丢弃任何非空行。
"""

import re
from collections.abc import Iterable

from langchain_core.output_parsers import BaseOutputParser

from ..models.review_result import ClassifiedFindings, Finding, SeverityLevel
from ..prompts.templates import NO_ISSUES_SENTINEL

# 解析格式: [等级] 文件名:行号 - 问题描述 - 修复建议
# 问题描述中出现 "-" 时会匹配失败，回退为 unknown
FINDING_PATTERN = re.compile(
    r"\[([^\]]+)\]\s+([^:]+):(\d+)\s+-\s+([^\-]+)\s+-\s+(.+)"
)

UNKNOWN = "unknown"


def split_lines(text: str) -> list[str]:
    """拆分为去除首尾空白后的非空行"""
    return [line.strip() for line in text.split("\n") if line.strip()]


def classify(text: str) -> ClassifiedFindings:
    """按等级分拣模型响应

    包含 [block] 的行归为阻断级，否则包含 [high] 的行归为高级别，
    每行最多计入一次。

    Args:
        text: 模型返回的文本

    Returns:
        ClassifiedFindings: 分拣结果
    """
    text = text.strip()
    if text == NO_ISSUES_SENTINEL:
        return ClassifiedFindings(raw_text=text, no_issues=True)

    block: list[str] = []
    high: list[str] = []
    tagged: list[str] = []
    tokens = [level.token for level in SeverityLevel]

    for line in split_lines(text):
        if SeverityLevel.BLOCK.token in line:
            block.append(line)
        elif SeverityLevel.HIGH.token in line:
            high.append(line)
        if any(token in line for token in tokens):
            tagged.append(line)

    return ClassifiedFindings(raw_text=text, block=block, high=high, tagged=tagged)


def parse_finding(line: str) -> Finding:
    """把一行问题解析为 Finding，无法解析时整行作为问题描述"""
    match = FINDING_PATTERN.search(line)
    if match is None:
        return Finding(
            severity=UNKNOWN,
            file=UNKNOWN,
            line="0",
            description=line,
            suggestion="",
        )
    return Finding(
        severity=match.group(1),
        file=match.group(2),
        line=match.group(3),
        description=match.group(4).strip(),
        suggestion=match.group(5).strip(),
    )


def parse_detailed(lines: Iterable[str]) -> list[Finding]:
    """逐行解析，每个输入行恰好产生一个 Finding"""
    return [parse_finding(line) for line in lines]


class FindingOutputParser(BaseOutputParser[ClassifiedFindings]):
    """LCEL 链中使用的评审结果解析器"""

    def parse(self, text: str) -> ClassifiedFindings:
        return classify(text)

    @property
    def _type(self) -> str:
        return "airvw_findings"


# 单例实例
finding_parser = FindingOutputParser()
