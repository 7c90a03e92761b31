from __future__ import annotations

import httpx
import openai
import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from airvw.chains.review_chain import create_review_chain
from airvw.errors import ReviewServiceError
from airvw.languages import get_strategy
from airvw.prompts.templates import NO_ISSUES_SENTINEL

INPUTS = {"diff_files": {"a.go": "+go func() {}()"}, "lint_results": {}}


def test_chain_classifies_model_response() -> None:
    llm = FakeListChatModel(
        responses=["  [block] a.go:1 - goroutine泄漏 - 使用WaitGroup\n[suggest] a.go:2 - 命名 - 改名\n"]
    )
    findings = create_review_chain(get_strategy("golang"), llm=llm).invoke(INPUTS)

    assert findings.block == ["[block] a.go:1 - goroutine泄漏 - 使用WaitGroup"]
    assert findings.raw_text.startswith("[block]")
    assert len(findings.tagged) == 2


def test_chain_sentinel_response() -> None:
    llm = FakeListChatModel(responses=[NO_ISSUES_SENTINEL])
    findings = create_review_chain(get_strategy("golang"), llm=llm).invoke(INPUTS)
    assert findings.no_issues


def test_chain_sends_language_prompt() -> None:
    prompts: list[str] = []

    def capture(prompt):
        prompts.append(prompt)
        return NO_ISSUES_SENTINEL

    create_review_chain(get_strategy("python"), llm=RunnableLambda(capture)).invoke(
        {"diff_files": {"a.py": "+import os"}, "lint_results": {"a.py": "【规则检查】未发现违规问题"}}
    )
    assert "资深Python工程师" in prompts[0]
    assert "=== 文件：a.py ===" in prompts[0]


def test_business_error_code_is_fatal() -> None:
    request = httpx.Request("POST", "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions")

    def fail(prompt):
        raise openai.BadRequestError(
            "Input data may contain inappropriate content.",
            response=httpx.Response(400, request=request),
            body={"code": "DataInspectionFailed", "message": "Input data may contain inappropriate content."},
        )

    with pytest.raises(ReviewServiceError) as exc_info:
        create_review_chain(get_strategy("golang"), llm=RunnableLambda(fail)).invoke(INPUTS)
    assert exc_info.value.code == "DataInspectionFailed"


def test_transport_error_is_fatal() -> None:
    request = httpx.Request("POST", "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions")

    def fail(prompt):
        raise openai.APIConnectionError(request=request)

    with pytest.raises(ReviewServiceError) as exc_info:
        create_review_chain(get_strategy("golang"), llm=RunnableLambda(fail)).invoke(INPUTS)
    assert exc_info.value.code == "APIConnectionError"


def test_empty_choices_yield_empty_response() -> None:
    from langchain_openai import ChatOpenAI

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-1",
                "object": "chat.completion",
                "created": 0,
                "model": "qwen3-coder-plus",
                "choices": [],
            },
        )

    llm = ChatOpenAI(
        model="qwen3-coder-plus",
        api_key="sk-test",
        base_url="https://dashscope.aliyuncs.com/compatible-mode/v1",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        max_retries=0,
    )
    findings = create_review_chain(get_strategy("golang"), llm=llm).invoke(INPUTS)

    assert findings.raw_text == ""
    assert not findings.no_issues
    assert findings.block == []
    assert findings.high == []


def test_unformatted_response_has_no_blocking_findings() -> None:
    llm = FakeListChatModel(responses=["好的，以下是评审意见：\n```\n代码整体不错\n```"])
    findings = create_review_chain(get_strategy("golang"), llm=llm).invoke(INPUTS)

    assert findings.block == []
    assert findings.high == []
    assert findings.tagged == []
