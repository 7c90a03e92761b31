"""变更文件过滤"""

import logging
from collections.abc import Iterable

from .models.review_result import ChangedFile, FileStatus

logger = logging.getLogger(__name__)

REVIEWABLE_STATUSES = (FileStatus.ADDED, FileStatus.MODIFIED)


def is_reviewable(changed_file: ChangedFile, extension: str) -> bool:
    """新增/修改、非二进制、后缀匹配的文件才需要评审"""
    if changed_file.binary:
        return False
    return changed_file.status in REVIEWABLE_STATUSES and changed_file.path.endswith(
        extension
    )


def filter_files(changed_files: Iterable[ChangedFile], extension: str) -> dict[str, str]:
    """筛选需要评审的文件

    Args:
        changed_files: 上游返回的变更文件列表
        extension: 当前语言的文件后缀，如 ".go"

    Returns:
        文件路径 -> diff，同一路径出现多次时以最后一条为准
    """
    diff_map: dict[str, str] = {}
    for changed_file in changed_files:
        if changed_file.binary:
            logger.debug(f"跳过二进制文件: {changed_file.new_path}")
            continue

        if is_reviewable(changed_file, extension):
            diff_map[changed_file.path] = changed_file.diff
            logger.debug(
                f"检测到需评审文件: {changed_file.path}（状态: {changed_file.status.value}）"
            )
    return diff_map
