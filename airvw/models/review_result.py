"""评审数据模型"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SeverityLevel(str, Enum):
    """问题等级，从高到低依次为 block、high、medium、suggest"""

    BLOCK = "block"  # 阻断级，直接阻断 MR 合并
    HIGH = "high"  # 高风险
    MEDIUM = "medium"  # 中风险
    SUGGEST = "suggest"  # 优化建议

    @property
    def token(self) -> str:
        """响应文本中的等级标记，例如 [block]"""
        return f"[{self.value}]"


class FileStatus(str, Enum):
    """变更文件状态"""

    ADDED = "added"
    REMOVED = "removed"
    RENAMED = "renamed"
    MODIFIED = "modified"


class ChangedFile(BaseModel):
    """Codeup compare 接口返回的单个变更文件"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    diff: str = Field(default="", description="变更内容（unified diff）")
    new_path: str = Field(default="", alias="newPath", description="新增/修改后的路径")
    old_path: str = Field(default="", alias="oldPath", description="重命名/删除前的路径")
    new_file: bool = Field(default=False, alias="newFile")
    deleted_file: bool = Field(default=False, alias="deletedFile")
    renamed_file: bool = Field(default=False, alias="renamedFile")
    binary: bool = Field(default=False)

    @field_validator(
        "diff", "new_path", "old_path", "new_file", "deleted_file", "renamed_file", "binary",
        mode="before",
    )
    @classmethod
    def _null_as_default(cls, value, info):
        # 接口可能返回 null
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @property
    def path(self) -> str:
        """优先使用新路径，新路径为空时回退到原路径"""
        return self.new_path or self.old_path

    @property
    def status(self) -> FileStatus:
        if self.new_file:
            return FileStatus.ADDED
        if self.deleted_file:
            return FileStatus.REMOVED
        if self.renamed_file:
            return FileStatus.RENAMED
        return FileStatus.MODIFIED


class CompareResponse(BaseModel):
    """Codeup compare 接口响应"""

    model_config = ConfigDict(extra="ignore")

    commits: list = Field(default_factory=list)
    diffs: list[ChangedFile] = Field(default_factory=list)
    messages: Optional[list[str]] = None

    @field_validator("commits", "diffs", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value


class Finding(BaseModel):
    """从模型响应中解析出的单个问题"""

    severity: str = Field(description="问题等级，无法解析时为 unknown")
    file: str = Field(description="文件名")
    line: str = Field(description="行号")
    description: str = Field(description="问题描述")
    suggestion: str = Field(default="", description="修复建议")


class ClassifiedFindings(BaseModel):
    """按等级分拣后的响应行"""

    raw_text: str = ""
    no_issues: bool = False
    block: list[str] = Field(default_factory=list)
    high: list[str] = Field(default_factory=list)
    tagged: list[str] = Field(default_factory=list, description="包含任一等级标记的行")


class ReviewOutcome(BaseModel):
    """评审结论"""

    model_config = ConfigDict(frozen=True)

    status: str = Field(description="success/blocked")
    total_issues: int = Field(default=0, description="报告范围内的问题数")
    block_reason: Optional[str] = Field(None, description="阻断原因：阻断级/高级别")
    block_issues: list[Finding] = Field(default_factory=list, description="报告的问题列表")
    message: str = Field(default="", description="消息")

    @property
    def passed(self) -> bool:
        return self.status != "blocked"

    def to_json(self) -> str:
        """输出与报告一致的 JSON，省略空的阻断原因和问题列表"""
        return self.model_dump_json(
            indent=2,
            exclude_none=True,
            exclude={"block_issues"} if not self.block_issues else None,
        )
