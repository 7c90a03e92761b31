"""阻断策略"""

import logging
from collections.abc import Sequence

from .models.review_result import ClassifiedFindings, ReviewOutcome, SeverityLevel
from .parsers.review_parser import parse_detailed

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_BLOCKED = "blocked"

REASON_BLOCK = "阻断级"
REASON_HIGH = "高级别"


def decide(
    block_findings: Sequence[str],
    high_findings: Sequence[str],
    min_severity: str,
    informational: Sequence[str] = (),
) -> ReviewOutcome:
    """根据评审等级决定是否阻断

    - 评审等级为 block 且存在阻断级问题：阻断，报告阻断级问题
    - 评审等级为 high 且存在阻断级或高级别问题：阻断，先报告阻断级再报告高级别
    - 其余情况通过；informational 中的问题作为非阻塞问题一并报告

    medium/suggest 等其他等级目前不会触发阻断。

    Args:
        block_findings: 阻断级问题行
        high_findings: 高级别问题行
        min_severity: 配置的评审等级
        informational: 通过时展示的全部问题行

    Returns:
        ReviewOutcome: 评审结论
    """
    if min_severity == SeverityLevel.BLOCK.value and block_findings:
        return _blocked(list(block_findings), REASON_BLOCK)

    if min_severity == SeverityLevel.HIGH.value and (block_findings or high_findings):
        return _blocked(list(block_findings) + list(high_findings), REASON_HIGH)

    if min_severity not in (SeverityLevel.BLOCK.value, SeverityLevel.HIGH.value):
        logger.debug(f"评审等级 {min_severity!r} 不触发阻断，仅展示问题")

    if informational:
        return ReviewOutcome(
            status=STATUS_SUCCESS,
            total_issues=len(informational),
            block_issues=parse_detailed(informational),
            message=f"评审通过，发现{len(informational)}个非阻塞问题",
        )
    return ReviewOutcome(
        status=STATUS_SUCCESS, total_issues=0, message="评审通过，未发现问题"
    )


def decide_from_response(findings: ClassifiedFindings, min_severity: str) -> ReviewOutcome:
    """对分拣后的模型响应做阻断决策"""
    return decide(findings.block, findings.high, min_severity, informational=findings.tagged)


def _blocked(lines: list[str], reason: str) -> ReviewOutcome:
    logger.debug(f"检测到{len(lines)}个{reason}问题，终止流程")
    return ReviewOutcome(
        status=STATUS_BLOCKED,
        total_issues=len(lines),
        block_reason=reason,
        block_issues=parse_detailed(lines),
        message=f"检测到{len(lines)}个{reason}问题，终止流程",
    )
