"""
错误类型

每个错误携带对应的 HTTP 状态码，由 api.errors 统一转换为
{"success": false, "message": ...} 响应。
"""
from typing import Optional


class RandomnessError(Exception):
    """所有业务错误的基类"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(RandomnessError):
    """缺少凭据或配置"""
    status_code = 500


class ValidationError(RandomnessError):
    """请求参数不合法"""
    status_code = 400


class InvalidRangeError(ValidationError):
    """min 必须严格小于 max"""


class FileParseError(ValidationError):
    """上传文件无法解析"""


class EmptyInputError(RandomnessError):
    """候选池或列表为空"""
    status_code = 400


class EmptyListError(EmptyInputError):
    pass


class UpstreamError(RandomnessError):
    """外部服务 (Apify / 合约) 调用失败"""
    status_code = 500


class RateLimitError(UpstreamError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


# 只匹配状态文本，裸数字 "429" 不算限流
RATE_LIMIT_MARKERS = ("rate limit", "ratelimit", "too many requests", "429 client error")


def is_rate_limit_message(message: str) -> bool:
    text = (message or "").lower()
    return any(marker in text for marker in RATE_LIMIT_MARKERS)


def as_upstream_error(exc: Exception, source: str) -> RandomnessError:
    """把第三方异常转换为 UpstreamError，限流类错误单独区分；业务错误原样返回"""
    if isinstance(exc, RandomnessError):
        return exc
    message = str(exc) or exc.__class__.__name__
    if is_rate_limit_message(message):
        return RateLimitError(f"Rate limit exceeded for {source}. Please try again later.")
    return UpstreamError(f"{source} request failed: {message}")
