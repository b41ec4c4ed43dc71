"""
领域异常

纯函数层（校验、归一化、解析）只返回结果对象，不抛异常；
以下异常只在服务层边界使用，由 API 层转换为 HTTP 错误。
"""
from typing import List, Optional


class QBankError(Exception):
    """题库服务异常基类"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(QBankError):
    """数据未通过校验（题库名称、题目结构等）"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class ConfigurationError(QBankError):
    """配置值非法（如错题本移除阈值超出 1-999）或缺少必要配置"""


class NotFoundError(QBankError):
    """资源不存在"""
