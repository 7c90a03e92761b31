"""数据模型定义"""

from .config import CodeupConfig, LLMConfig, ReviewerConfig
from .review_result import (
    ChangedFile,
    ClassifiedFindings,
    CompareResponse,
    FileStatus,
    Finding,
    ReviewOutcome,
    SeverityLevel,
)

__all__ = [
    "LLMConfig",
    "CodeupConfig",
    "ReviewerConfig",
    "ChangedFile",
    "ClassifiedFindings",
    "CompareResponse",
    "FileStatus",
    "Finding",
    "ReviewOutcome",
    "SeverityLevel",
]
