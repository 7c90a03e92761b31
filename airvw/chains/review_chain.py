"""LangChain 评审链"""

import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable, RunnableLambda
from openai import APIError, OpenAIError

from ..errors import ReviewServiceError
from ..languages import LanguageStrategy
from ..models.config import LLMConfig
from ..models.review_result import ClassifiedFindings
from ..parsers.review_parser import finding_parser

logger = logging.getLogger(__name__)


def create_llm(config: LLMConfig) -> BaseChatModel:
    """初始化百炼 OpenAI 兼容模型"""
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=config.model,
        api_key=config.api_key,
        base_url=config.base_url,
        temperature=config.temperature,
        top_p=config.top_p,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
        max_retries=0,
    )


def create_review_chain(
    strategy: LanguageStrategy,
    llm_config: LLMConfig | None = None,
    llm: BaseChatModel | None = None,
) -> Runnable[dict[str, Any], ClassifiedFindings]:
    """创建评审链

    使用 LCEL 构建：
    1. 按语言策略生成 prompt
    2. 调用 LLM
    3. 分拣评审结果

    输入为 ``{"diff_files": ..., "lint_results": ...}``。

    Args:
        strategy: 语言策略
        llm_config: LLM 配置，未提供 llm 时用于创建模型
        llm: 可选的模型实例

    Returns:
        评审链
    """
    if llm is None:
        llm = create_llm(llm_config or LLMConfig())

    def prepare_prompt(inputs: dict[str, Any]) -> str:
        diff_files = inputs["diff_files"]
        prompt = strategy.build_prompt(diff_files, inputs.get("lint_results", {}))

        logger.debug("=" * 80)
        logger.debug("【AI 评审】发送给 LLM 的 prompt")
        logger.debug("=" * 80)
        logger.debug(f"待评审文件数: {len(diff_files)}")
        logger.debug(prompt)
        return prompt

    def invoke_llm(prompt: str) -> str:
        try:
            result = (llm | StrOutputParser()).invoke(prompt)
        except APIError as e:
            code = str(e.code or getattr(e, "status_code", None) or type(e).__name__)
            raise ReviewServiceError(code, e.message) from e
        except OpenAIError as e:
            raise ReviewServiceError(type(e).__name__, str(e)) from e
        except IndexError:
            # 响应中没有 choices，视为空结果
            logger.debug("LLM 响应中没有 choices，评审结果为空")
            result = ""

        logger.debug("=" * 80)
        logger.debug("【AI 评审】LLM 原始响应")
        logger.debug("=" * 80)
        logger.debug(result)
        return result.strip()

    def classify(result: str) -> ClassifiedFindings:
        findings = finding_parser.parse(result)
        logger.debug(
            f"AI评审完成，检测到{len(findings.block)}个阻断级问题，"
            f"{len(findings.high)}个高级别问题"
        )
        return findings

    return (
        RunnableLambda(prepare_prompt)
        | RunnableLambda(invoke_llm)
        | RunnableLambda(classify)
    )
