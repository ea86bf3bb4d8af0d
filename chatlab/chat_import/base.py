"""Base parser interface used by all chat-export format implementations."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from .errors import FormatError
from .schema import FormatDescriptor, ParseResult


logger = logging.getLogger(__name__)


class ChatParser(ABC):
    """
    一种导出格式 = 一个检测器 + 一个解析器。

    - detect：纯函数且总是返回 bool，子类只实现 _looks_like，内部任何异常都视为“不匹配”
    - parse：内容无法转换时抛 FormatError，不做部分结果
    """

    name: str = ""
    platform: str = ""

    @property
    def descriptor(self) -> FormatDescriptor:
        return FormatDescriptor(name=self.name, platform=self.platform)

    def detect(self, content: str, filename: str) -> bool:
        try:
            return bool(self._looks_like(content, filename))
        except Exception as e:
            logger.debug(f"{self.name} 检测失败，视为不匹配: {e!r}")
            return False

    @abstractmethod
    def _looks_like(self, content: str, filename: str) -> bool:
        """宽松的形状检查：只回答“像不像”，允许抛异常。"""

    @abstractmethod
    def parse(self, content: str, filename: str) -> ParseResult:
        """严格转换为 ParseResult。"""

    def _load_json(self, content: str) -> Any:
        try:
            return json.loads(content)
        except (TypeError, ValueError) as e:
            raise FormatError(f"JSON 解析失败: {e}", cause=e, format_name=self.name) from e

    def _fail(self, message: str) -> FormatError:
        return FormatError(message, format_name=self.name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
