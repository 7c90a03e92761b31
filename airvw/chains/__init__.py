"""评审链"""

from .review_chain import create_llm, create_review_chain

__all__ = ["create_llm", "create_review_chain"]
