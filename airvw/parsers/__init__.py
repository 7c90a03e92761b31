"""评审结果解析"""

from .review_parser import classify, finding_parser, parse_detailed, parse_finding

__all__ = ["classify", "finding_parser", "parse_detailed", "parse_finding"]
