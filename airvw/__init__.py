"""airvw - 基于 LangChain 的云效 Codeup AI 代码评审工具"""

__version__ = "0.1.0"

from .chains import create_review_chain
from .cli import main
from .config import load_config
from .languages import Language, get_strategy
from .models import ChangedFile, Finding, ReviewerConfig, ReviewOutcome, SeverityLevel
from .parsers import classify, parse_detailed
from .pipeline import run_review
from .policy import decide

__all__ = [
    "main",
    "run_review",
    "load_config",
    "create_review_chain",
    "Language",
    "get_strategy",
    "classify",
    "parse_detailed",
    "decide",
    "ChangedFile",
    "Finding",
    "ReviewerConfig",
    "ReviewOutcome",
    "SeverityLevel",
]
