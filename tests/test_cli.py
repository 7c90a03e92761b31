from __future__ import annotations

import pytest
from click.testing import CliRunner

from airvw.cli import cli
from airvw.errors import ReviewServiceError
from airvw.languages import get_strategy
from airvw.models.review_result import ReviewOutcome
from airvw.pipeline import PipelineResult
from airvw.policy import decide

REQUIRED = [
    "--yunxiao-token", "pt-xxxxxxx",
    "--org-id", "67aa",
    "--repo-id", "5023797",
    "--from-commit", "aaa",
    "--to-commit", "bbb",
    "--baichuan-key", "sk-xxxxxxx",
]


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in ("AIRVW_YUNXIAO_TOKEN", "AIRVW_BAICHUAN_KEY", "AIRVW_LLM_BASE_URL"):
        monkeypatch.delenv(key, raising=False)


def _patch_run(monkeypatch, result=None, error=None):
    seen = []

    def fake_run_review(cfg):
        seen.append(cfg)
        if error is not None:
            raise error
        return result

    monkeypatch.setattr("airvw.cli.run_review", fake_run_review)
    return seen


def test_missing_params_exit_1(monkeypatch) -> None:
    seen = _patch_run(monkeypatch)
    result = CliRunner().invoke(cli, ["review", "--org-id", "67aa"])
    assert result.exit_code == 1
    assert "缺少必填参数" in result.output
    assert "yunxiao-token" in result.output
    assert seen == []


def test_comment_target_requires_mr_id(monkeypatch) -> None:
    _patch_run(monkeypatch)
    result = CliRunner().invoke(cli, ["review", *REQUIRED, "--comment-target", "mr"])
    assert result.exit_code == 1
    assert "mr-id" in result.output


def test_blocked_exits_1(monkeypatch) -> None:
    outcome = decide(["[block] a.go:1 - 数据竞争 - 加锁"], [], "block")
    seen = _patch_run(
        monkeypatch,
        PipelineResult(strategy=get_strategy("golang"), outcome=outcome, reviewed_files=["a.go"]),
    )
    result = CliRunner().invoke(cli, ["review", *REQUIRED, "--language", "Go", "--debug"])

    assert result.exit_code == 1
    assert "代码问题详情" in result.output
    assert '"status": "blocked"' in result.output
    assert seen[0].language == "Go"
    assert seen[0].debug is True
    assert seen[0].codeup.repo_id == 5023797


def test_pass_with_findings_exits_0(monkeypatch) -> None:
    outcome = decide([], [], "block", informational=["[suggest] a.go:1 - 命名 - 改名"])
    _patch_run(
        monkeypatch,
        PipelineResult(
            strategy=get_strategy("golang"),
            outcome=outcome,
            reviewed_files=["a.go"],
            warnings=["评论mr失败（不终止评审）：状态码500"],
        ),
    )
    result = CliRunner().invoke(cli, ["review", *REQUIRED])

    assert result.exit_code == 0
    assert "AI评审建议详情" in result.output
    assert "评论mr失败" in result.output


def test_no_reviewable_files_exits_0(monkeypatch) -> None:
    _patch_run(
        monkeypatch,
        PipelineResult(
            strategy=get_strategy("golang"),
            outcome=ReviewOutcome(status="success", message="无变更的.go文件，评审通过"),
        ),
    )
    result = CliRunner().invoke(cli, ["review", *REQUIRED])
    assert result.exit_code == 0
    assert "无变更的.go文件，评审通过" in result.output


def test_fatal_error_exits_1(monkeypatch) -> None:
    _patch_run(monkeypatch, error=ReviewServiceError("InvalidApiKey", "Invalid API-key provided."))
    result = CliRunner().invoke(cli, ["review", *REQUIRED])
    assert result.exit_code == 1
    assert "InvalidApiKey" in result.output


def test_init_and_check(tmp_path) -> None:
    runner = CliRunner()
    assert runner.invoke(cli, ["init"]).exit_code == 0
    assert (tmp_path / ".airvw.toml").exists()
    assert runner.invoke(cli, ["init"]).exit_code == 1

    result = runner.invoke(cli, ["check"])
    assert result.exit_code == 0
    assert "qwen3-coder-plus" in result.output


def test_blocked_report_count_round_trips(monkeypatch) -> None:
    from airvw.report import read_total_issues

    outcome = decide(
        ["[block] a.go:1 - 数据竞争 - 加锁"], ["[high] a.go:2 - 资源未关闭 - 关闭"], "high"
    )
    _patch_run(
        monkeypatch,
        PipelineResult(strategy=get_strategy("golang"), outcome=outcome, reviewed_files=["a.go"]),
    )
    output = CliRunner().invoke(cli, ["review", *REQUIRED]).output
    report = output[output.index("{") : output.rindex("}") + 1]

    assert read_total_issues(report) == 2
