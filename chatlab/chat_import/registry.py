"""格式注册表 / 分发器。

按注册顺序逐个尝试检测器：越具体的格式越靠前，宽松的兜底格式（QQ TXT）放最后。
第一个认领文件的格式负责解析；解析失败直接抛出，不会再换别的格式重试。
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .base import ChatParser
from .errors import UnrecognizedFormatError
from .schema import FormatDescriptor, ParseResult


logger = logging.getLogger(__name__)


class FormatRegistry:
    """构造后只读的格式列表。不缓存任何检测/解析结果。"""

    def __init__(self, parsers: Iterable[ChatParser]):
        self._parsers: Tuple[ChatParser, ...] = tuple(parsers)

    @property
    def parsers(self) -> Tuple[ChatParser, ...]:
        return self._parsers

    @property
    def descriptors(self) -> Tuple[FormatDescriptor, ...]:
        return tuple(p.descriptor for p in self._parsers)

    def resolve(self, content: str, filename: str) -> Optional[ChatParser]:
        for parser in self._parsers:
            if parser.detect(content, filename):
                return parser
        return None

    def detect(self, content: str, filename: str) -> Optional[str]:
        """只做检测：返回格式名称，无法识别时返回 None。"""

        parser = self.resolve(content, filename)
        return parser.name if parser is not None else None

    def dispatch(self, content: str, filename: str) -> Tuple[ChatParser, ParseResult]:
        """识别并解析，同时返回认领文件的解析器（调用方需要格式名时使用）。"""

        parser = self.resolve(content, filename)
        if parser is None:
            logger.warning(f"无法识别文件格式: {filename}")
            raise UnrecognizedFormatError(filename)

        logger.info(f"使用解析器: {parser.name} ({filename})")
        return parser, parser.parse(content, filename)

    def parse(self, content: str, filename: str) -> ParseResult:
        return self.dispatch(content, filename)[1]

    def list_supported_formats(self) -> List[Dict[str, str]]:
        return [d.to_dict() for d in self.descriptors]

    def __len__(self) -> int:
        return len(self._parsers)


def build_default_registry(timestamp_mode: Optional[str] = None) -> FormatRegistry:
    """按优先级注册所有内置格式。每次调用都返回新的注册表。"""

    from .chatlab_json import ChatLabJsonParser
    from .qq_json import QQJsonParser
    from .qq_txt import QQTxtParser

    return FormatRegistry([
        ChatLabJsonParser(),  # ChatLab 格式最优先
        QQJsonParser(timestamp_mode=timestamp_mode),
        QQTxtParser(timestamp_mode=timestamp_mode),  # TXT 格式兜底
    ])
