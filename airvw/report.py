"""评审报告与评论内容"""

import json

from .languages import get_strategy
from .models.config import ReviewerConfig
from .models.review_result import ReviewOutcome, SeverityLevel

LEVEL_LEGEND = {
    SeverityLevel.BLOCK: "阻断级，必须修复才能合并",
    SeverityLevel.HIGH: "高风险，建议优先修复",
    SeverityLevel.MEDIUM: "中风险，建议修复",
    SeverityLevel.SUGGEST: "优化建议，不强制",
}

COMMENT_TEMPLATE = """
### 🤖 AI Code Review 结果（{title}）
#### 评审范围：提交ID {from_commit} → {to_commit} 变更的{display_name}文件
#### 问题等级说明：
{legend}

---
{review_text}"""


def build_comment_body(config: ReviewerConfig, review_text: str, target: str) -> str:
    """生成评论 Markdown

    Args:
        config: 评审配置
        review_text: 模型原始评审结果
        target: mr 或 commit
    """
    if target == "commit":
        title = f"Commit {config.commit_id}"
        legend = {**LEVEL_LEGEND, SeverityLevel.BLOCK: "阻断级，必须修复"}
    else:
        title = f"MR #{config.mr_id}"
        legend = LEVEL_LEGEND

    return COMMENT_TEMPLATE.format(
        title=title,
        from_commit=config.from_commit,
        to_commit=config.to_commit,
        display_name=get_strategy(config.language).display_name,
        legend="\n".join(f"- {level.token}：{text}" for level, text in legend.items()),
        review_text=review_text,
    )


def format_outcome(outcome: ReviewOutcome) -> str:
    return outcome.to_json()


def read_total_issues(report: str) -> int:
    """从 JSON 报告中读取问题总数"""
    return int(json.loads(report).get("total_issues", 0))
