"""提示词模板"""

from .templates import NO_ISSUES_SENTINEL, build_prompt, build_review_content

__all__ = ["NO_ISSUES_SENTINEL", "build_prompt", "build_review_content"]
