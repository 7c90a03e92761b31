from __future__ import annotations

import pytest

from airvw.parsers.review_parser import classify, parse_detailed
from airvw.policy import REASON_BLOCK, REASON_HIGH, decide, decide_from_response
from airvw.prompts.templates import NO_ISSUES_SENTINEL
from airvw.report import format_outcome, read_total_issues

F1 = "[block] a.go:1 - 数据竞争 - 加锁"
F2 = "[high] a.go:2 - 资源未关闭 - 使用defer关闭"


def test_no_findings_passes() -> None:
    outcome = decide([], [], "block")
    assert outcome.passed
    assert outcome.status == "success"
    assert outcome.total_issues == 0


def test_block_level_blocks_on_block_findings() -> None:
    outcome = decide([F1], [], "block")
    assert not outcome.passed
    assert outcome.status == "blocked"
    assert outcome.block_reason == REASON_BLOCK
    assert outcome.block_issues == parse_detailed([F1])
    assert outcome.total_issues == 1


def test_high_level_blocks_on_high_findings() -> None:
    outcome = decide([], [F2], "high")
    assert outcome.status == "blocked"
    assert outcome.block_reason == REASON_HIGH
    assert outcome.block_issues == parse_detailed([F2])


def test_high_findings_do_not_block_at_block_level() -> None:
    assert decide([], [F2], "block").passed


def test_high_level_reports_block_before_high() -> None:
    outcome = decide([F1], [F2], "high")
    assert outcome.block_issues == parse_detailed([F1, F2])
    assert outcome.total_issues == 2


@pytest.mark.parametrize("level", ["medium", "suggest", "", "BLOCK"])
def test_other_levels_never_block(level: str) -> None:
    outcome = decide([F1], [F2], level, informational=[F1, F2])
    assert outcome.passed
    assert outcome.total_issues == 2


def test_pass_still_surfaces_informational_findings() -> None:
    text = "[medium] a.go:3 - 错误未包装 - 包装错误\n[suggest] a.go:4 - 命名 - 改名"
    outcome = decide_from_response(classify(text), "block")
    assert outcome.status == "success"
    assert outcome.total_issues == 2
    assert [f.severity for f in outcome.block_issues] == ["medium", "suggest"]
    assert outcome.message == "评审通过，发现2个非阻塞问题"


def test_sentinel_response_passes_with_zero_findings() -> None:
    outcome = decide_from_response(classify(NO_ISSUES_SENTINEL), "high")
    assert outcome.passed
    assert outcome.total_issues == 0
    assert outcome.block_issues == []


@pytest.mark.parametrize(
    ("block", "high", "level"),
    [([F1], [], "block"), ([F1], [F2], "high"), ([], [], "block")],
)
def test_report_total_matches_reported_findings(block, high, level) -> None:
    outcome = decide(block, high, level)
    assert read_total_issues(format_outcome(outcome)) == len(outcome.block_issues)


def test_report_omits_empty_fields() -> None:
    report = format_outcome(decide([], [], "block"))
    assert "block_reason" not in report
    assert "block_issues" not in report
