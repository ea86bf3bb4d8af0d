"""统一加载入口。

导入核心本身不碰文件系统；这里负责：
- 读取文件（大小检查 + 解码）
- 用文件名（basename）调用注册表检测/解析
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..config import Config
from .errors import FileTooLargeError
from .registry import FormatRegistry, build_default_registry
from .schema import ParseResult


logger = logging.getLogger(__name__)


def read_chat_file(file_path: str, encoding: Optional[str] = None) -> str:
    """读取整个文件为文本；超过 Config.MAX_FILE_SIZE_MB 时拒绝。"""

    filename = os.path.basename(file_path)
    size_mb = os.path.getsize(file_path) / (1024 * 1024)
    if size_mb > Config.MAX_FILE_SIZE_MB:
        raise FileTooLargeError(filename, size_mb, Config.MAX_FILE_SIZE_MB)

    with open(file_path, "r", encoding=encoding or Config.FILE_ENCODING) as f:
        return f.read()


def load_chat_file(file_path: str, registry: Optional[FormatRegistry] = None) -> ParseResult:
    """自动检测文件格式并解析。"""

    if registry is None:
        registry = build_default_registry()
    content = read_chat_file(file_path)
    return registry.parse(content, os.path.basename(file_path))


def detect_file_format(file_path: str, registry: Optional[FormatRegistry] = None) -> Optional[str]:
    """检测文件格式，返回格式名称；文件读取失败或无法识别时返回 None。"""

    if registry is None:
        registry = build_default_registry()
    try:
        content = read_chat_file(file_path)
    except (OSError, UnicodeDecodeError, FileTooLargeError) as e:
        logger.warning(f"读取文件失败，无法检测格式: {file_path}: {e}")
        return None

    return registry.detect(content, os.path.basename(file_path))
