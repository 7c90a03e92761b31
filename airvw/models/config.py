"""配置数据模型"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CODEUP_DOMAIN = "openapi-rdc.aliyuncs.com"
DEFAULT_LLM_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"


class LLMConfig(BaseModel):
    """LLM 配置（阿里云百炼 OpenAI 兼容接口）"""

    model: str = Field(default="qwen3-coder-plus", description="模型名称")
    api_key: str = Field(default="", description="百炼 API Key")
    base_url: str = Field(default=DEFAULT_LLM_BASE_URL, description="OpenAI 兼容 Base URL")
    temperature: float = Field(default=0.2, description="温度参数")
    top_p: float = Field(default=0.9, description="核采样参数")
    max_tokens: int = Field(default=8192, description="最大 token 数")
    timeout: int = Field(default=120, description="超时时间（秒）")


class CodeupConfig(BaseModel):
    """云效 Codeup 配置"""

    token: str = Field(default="", description="云效 Token（x-yunxiao-token）")
    org_id: str = Field(default="", description="组织 ID")
    repo_id: int = Field(default=0, description="仓库 ID")
    domain: str = Field(default=DEFAULT_CODEUP_DOMAIN, description="云效 OpenAPI 域名")
    timeout: int = Field(default=30, description="超时时间（秒）")


class ReviewerConfig(BaseModel):
    """评审器配置"""

    model_config = ConfigDict(extra="ignore")

    llm: LLMConfig = Field(default_factory=LLMConfig, description="LLM 配置")
    codeup: CodeupConfig = Field(default_factory=CodeupConfig, description="Codeup 配置")
    language: str = Field(default="golang", description="评审语言：golang/java/python/javascript")
    level: str = Field(default="block", description="评审等级：block/high/medium/suggest")
    comment_target: Optional[str] = Field(None, description="评论目标：mr/commit/空")
    mr_id: int = Field(default=0, description="MR ID（评论 MR 时必填）")
    commit_id: str = Field(default="", description="Commit hash（评论 Commit 时必填）")
    from_commit: str = Field(default="", description="源提交 ID")
    to_commit: str = Field(default="", description="目标提交 ID")
    working_dir: str = Field(default=".", description="执行规则检查的仓库目录")
    debug: bool = Field(default=False, description="是否开启调试日志")
    log_file: Optional[str] = Field(None, description="可选的调试日志文件")

    def missing_params(self) -> list[str]:
        """返回缺失的必填参数名"""
        missing = []
        if not self.codeup.token:
            missing.append("yunxiao-token")
        if not self.codeup.org_id:
            missing.append("org-id")
        if not self.codeup.repo_id:
            missing.append("repo-id")
        if not self.from_commit:
            missing.append("from-commit")
        if not self.to_commit:
            missing.append("to-commit")
        if not self.llm.api_key:
            missing.append("baichuan-key")
        if self.comment_target == "mr" and not self.mr_id:
            missing.append("mr-id（评论MR时必填）")
        if self.comment_target == "commit" and not self.commit_id:
            missing.append("commit-id（评论Commit时必填）")
        return missing
