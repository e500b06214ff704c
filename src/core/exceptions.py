#!/usr/bin/env python3
"""
SFT 演示客户端异常定义

所有错误都向上传播，不做重试
"""

from typing import Optional, Dict, Any


class DemoError(Exception):
    """演示客户端基础异常"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigError(DemoError):
    """配置错误 - 严重，不可恢复"""
    pass


class StateError(DemoError):
    """本地状态文件缺失或损坏"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid state file: {path}", {"path": path, "reason": reason})
        self.path = path


class ApiRequestError(DemoError):
    """SFT API 请求失败（网络错误或非 2xx 状态码）"""

    def __init__(self, action: str, reason: str, status_code: Optional[int] = None):
        details = {"action": action, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(f"API request failed: {action}", details)
        self.action = action
        self.status_code = status_code


class TransactionDecodeError(DemoError):
    """API 返回的数据不是合法的交易"""

    def __init__(self, action: str, reason: str):
        super().__init__(f"Malformed transaction payload: {action}", {"action": action, "reason": reason})
        self.action = action


class SigningError(DemoError):
    """签名失败（密钥不在交易的签名者列表中）"""
    pass


class SubmissionError(DemoError):
    """交易发送或确认失败"""
    pass
