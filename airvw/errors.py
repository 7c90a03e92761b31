"""异常定义"""


class AirvwError(Exception):
    """airvw 异常基类"""


class ConfigError(AirvwError):
    """配置缺失或无效"""


class DiffFetchError(AirvwError):
    """拉取变更失败（网络异常、非 200 状态码、响应无法解析），终止评审"""


class ReviewServiceError(AirvwError):
    """调用百炼评审服务失败，终止评审"""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"百炼API业务错误：{code} - {message}")


class CommentError(AirvwError):
    """评论 MR/Commit 失败，不终止评审"""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
