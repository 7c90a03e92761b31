"""云效 Codeup OpenAPI 客户端

只负责 HTTP 调用、错误处理和响应校验，不做评审决策。
"""

import json
import logging

import httpx
from pydantic import ValidationError

from .errors import CommentError, DiffFetchError
from .models.config import CodeupConfig
from .models.review_result import ChangedFile, CompareResponse

logger = logging.getLogger(__name__)


def mask_sensitive(value: str) -> str:
    """脱敏，只保留前 6 位"""
    if len(value) <= 6:
        return "****"
    return value[:6] + "****"


class CodeupClient:
    """Codeup OpenAPI 客户端"""

    def __init__(self, config: CodeupConfig, http_client: httpx.Client | None = None):
        self._config = config
        self._base_url = f"https://{config.domain}/oapi/v1/codeup"
        self._http_client = http_client or httpx.Client(timeout=config.timeout)

    def _headers(self) -> dict[str, str]:
        return {"x-yunxiao-token": self._config.token, "Accept": "application/json"}

    def _repo_url(self) -> str:
        return (
            f"{self._base_url}/organizations/{self._config.org_id}"
            f"/repositories/{self._config.repo_id}"
        )

    def close(self) -> None:
        self._http_client.close()

    def get_compare_diffs(self, from_commit: str, to_commit: str) -> list[ChangedFile]:
        """拉取两个提交之间的变更文件

        Raises:
            DiffFetchError: 请求失败、状态码非 200 或响应无法解析
        """
        logger.debug("=" * 80)
        logger.debug("【拉取变更】云效 OpenAPI compares")
        logger.debug(f"Token: {mask_sensitive(self._config.token)}")
        logger.debug(f"OrgID: {self._config.org_id}, RepoID: {self._config.repo_id}")
        logger.debug(f"From: {from_commit}, To: {to_commit}")

        try:
            response = self._http_client.get(
                f"{self._repo_url()}/compares",
                headers=self._headers(),
                params={"from": from_commit, "to": to_commit},
            )
        except httpx.HTTPError as e:
            raise DiffFetchError(f"云效OpenAPI请求失败：{e}") from e

        if response.status_code != 200:
            raise DiffFetchError(
                f"云效OpenAPI返回异常状态码：{response.status_code}，响应内容：{response.text}"
            )

        try:
            compare = CompareResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise DiffFetchError(
                f"解析云效OpenAPI响应失败：{e}，响应内容：{response.text}"
            ) from e

        logger.debug(f"成功拉取响应，共检测到 {len(compare.diffs)} 个变更文件")
        return compare.diffs

    def comment_merge_request(self, mr_id: int, body: str) -> None:
        """评论到 MR

        Raises:
            CommentError: 请求失败或状态码非 2xx
        """
        logger.debug(f"【评论 MR】MRID: {mr_id}")
        response = self._post_comment(f"{self._base_url}/change_requests/{mr_id}/comments", body)
        logger.debug(f"MR 评论成功，评论ID: {_comment_id(response)}")

    def comment_commit(self, commit_id: str, body: str) -> None:
        """评论到 Commit

        Raises:
            CommentError: 请求失败或状态码非 2xx
        """
        logger.debug(f"【评论 Commit】CommitID: {commit_id}")
        if not body:
            logger.debug("评审结果为空，跳过评论提交")
            return
        response = self._post_comment(f"{self._repo_url()}/commits/{commit_id}/comments", body)
        logger.debug(f"Commit 评论成功，评论ID: {_comment_id(response)}")

    def _post_comment(self, url: str, body: str) -> httpx.Response:
        headers = dict(self._headers(), **{"Content-Type": "application/json"})
        try:
            response = self._http_client.post(url, headers=headers, json={"content": body})
        except httpx.HTTPError as e:
            raise CommentError(f"创建评论API调用失败：{e}") from e

        if not response.is_success:
            if response.status_code == 403:
                logger.warning(
                    "创建评论失败：Token权限不足，请确认 Token 具备 Codeup 仓库写权限和评论权限"
                )
            raise CommentError(
                f"创建评论失败：状态码{response.status_code}，响应内容：{response.text}",
                status_code=response.status_code,
            )
        return response


def _comment_id(response: httpx.Response) -> object:
    # 评论已提交，响应体为空或无法解析不算失败
    if not response.content:
        return None
    try:
        return response.json().get("id")
    except (json.JSONDecodeError, AttributeError):
        return None
