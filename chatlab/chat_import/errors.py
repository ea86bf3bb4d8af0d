"""导入层异常。

- FormatError：检测器已认领，但内容无法转换（语法错误 / 必需字段缺失或类型不对）
- UnrecognizedFormatError：没有任何检测器认领该文件
- FileTooLargeError：读取文件前的大小检查失败（仅 loader 使用）
"""

from __future__ import annotations

from typing import Optional


class ChatImportError(ValueError):
    """导入层异常基类。"""


class FormatError(ChatImportError):
    def __init__(self, message: str, cause: Optional[BaseException] = None, format_name: Optional[str] = None):
        if format_name:
            message = f"[{format_name}] {message}"
        super().__init__(message)
        self.cause = cause
        self.format_name = format_name


class UnrecognizedFormatError(ChatImportError):
    def __init__(self, filename: str):
        super().__init__(f"无法识别文件格式: {filename}")
        self.filename = filename


class FileTooLargeError(ChatImportError):
    def __init__(self, filename: str, size_mb: float, limit_mb: float):
        super().__init__(f"文件过大: {filename} ({size_mb:.2f}MB > {limit_mb}MB)")
        self.filename = filename
        self.size_mb = size_mb
        self.limit_mb = limit_mb
