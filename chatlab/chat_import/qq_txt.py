"""QQ TXT：QQ 电脑版导出的文本格式（兜底格式，注册在最后）。

TXT 结构：

    消息记录（此消息记录为文本格式，不支持重新导入）

    ================================================================
    消息分组:我的群聊
    ================================================================
    消息对象:某某群
    ================================================================

    2023-01-01 9:05:03 张三(12345)
    第一行
    第二行

    2023-01-01 9:06:10 李四<lisi@example.com>
    [图片]

- 头部行：YYYY-MM-DD H:MM:SS 昵称(QQ) 或 昵称<邮箱>
- 内容行：头部行之后、下一个头部行之前的所有行（允许多行、允许末尾没有空行）

异常块策略（宽松，跳过并继续）：
- 第一个头部行之前的非头部行一律忽略（只从中读取 消息分组 / 消息对象）
- 第一个头部行之后，分隔线和标签行只有成对出现（分隔线紧接标签行）时才算抬头，
  否则按普通内容行保留
- 头部行时间无法解析的，整块（头部 + 内容）跳过，并记 warning 日志
- 一个有效块都没有时抛 FormatError
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import Config
from .base import ChatParser
from .core import filename_stem, has_suffix, parse_datetime_text, datetime_to_epoch
from .enums import ChatPlatform, ChatType
from .schema import ConversationMeta, Member, Message, ParseResult


logger = logging.getLogger(__name__)


# 时间戳 + 发送者 - 聊天记录头部行
TIME_LINE_PATTERN = re.compile(
    r'^(\d{4}-\d{2}-\d{2} \d{1,2}:\d{2}:\d{2}) (.+?)(?:\((\d+)\)|<([^<>\s]+)>)\s*$'
)

# 导出文件的抬头
_GROUP_LABEL_PATTERN = re.compile(r'^消息分组\s*[:：]\s*(.*)$')
_TARGET_LABEL_PATTERN = re.compile(r'^消息对象\s*[:：]\s*(.*)$')
_SEPARATOR_PATTERN = re.compile(r'^={8,}$')

# 系统QQ号（群系统提示）
SYSTEM_QQ_NUMBERS = frozenset({'10000', '1000000'})

# 链接检测（轻量：只用于判断有无 URL）
HTTP_PATTERN = re.compile(r'(http|https)://')


@dataclass
class _Block:
    timepat: str
    sender: str
    sender_id: str
    lines: List[str] = field(default_factory=list)

    def text(self) -> str:
        lines = list(self.lines)
        # 去掉块尾空行
        while lines and not lines[-1].strip():
            lines.pop()
        while lines and not lines[0].strip():
            lines.pop(0)
        return "\n".join(lines)


def _message_type(sender_id: str, content: str) -> str:
    if sender_id in SYSTEM_QQ_NUMBERS:
        return 'system'
    if '撤回了一条消息' in content:
        return 'recall'
    if '[图片]' in content:
        return 'image'
    if '[表情]' in content:
        return 'emoji'
    if HTTP_PATTERN.search(content):
        return 'link'
    return 'text'


def _is_label(line: str) -> bool:
    return bool(_GROUP_LABEL_PATTERN.match(line) or _TARGET_LABEL_PATTERN.match(line))


def _is_preamble(line: str) -> bool:
    return bool(_SEPARATOR_PATTERN.match(line) or _is_label(line))


class QQTxtParser(ChatParser):
    name = "QQ TXT"
    platform = "qq"

    def __init__(self, timestamp_mode: Optional[str] = None):
        self.timestamp_mode = (timestamp_mode or Config.TIMESTAMP_MODE).strip().lower()

    def _looks_like(self, content: str, filename: str) -> bool:
        if not has_suffix(filename, ".txt"):
            return False
        return any(TIME_LINE_PATTERN.match(line.strip()) for line in content.splitlines())

    def parse(self, content: str, filename: str) -> ParseResult:
        if not isinstance(content, str):
            raise self._fail("TXT 内容不是字符串")

        group_label: Optional[str] = None
        target_label: Optional[str] = None
        blocks: List[_Block] = []
        current: Optional[_Block] = None

        lines = [raw_line.rstrip() for raw_line in content.splitlines()]
        stripped_lines = [line.strip() for line in lines]
        # 抬头区：第一个头部行之前；或正文中“分隔线 + 标签行”成对出现（多会话合并导出）
        in_header = [False] * len(lines)
        seen_message = False
        for i, stripped in enumerate(stripped_lines):
            if TIME_LINE_PATTERN.match(stripped):
                seen_message = True
                continue
            if not seen_message:
                in_header[i] = _is_preamble(stripped)
            elif _is_label(stripped) and i > 0 and _SEPARATOR_PATTERN.match(stripped_lines[i - 1]):
                in_header[i] = True
                in_header[i - 1] = True
                if i + 1 < len(lines) and _SEPARATOR_PATTERN.match(stripped_lines[i + 1]):
                    in_header[i + 1] = True

        for i, line in enumerate(lines):
            stripped = stripped_lines[i]

            m = TIME_LINE_PATTERN.match(stripped)
            if m:
                current = _Block(
                    timepat=m.group(1),
                    sender=m.group(2).strip(),
                    sender_id=m.group(3) or m.group(4),
                )
                blocks.append(current)
                continue

            if in_header[i]:
                gm = _GROUP_LABEL_PATTERN.match(stripped)
                tm = _TARGET_LABEL_PATTERN.match(stripped)
                if gm and group_label is None:
                    group_label = gm.group(1).strip()
                if tm and target_label is None:
                    target_label = tm.group(1).strip()
                # 抬头结束当前块
                current = None
                continue

            if current is not None:
                current.lines.append(line)

        members_by_id: Dict[str, Member] = {}
        messages: List[Message] = []
        skipped = 0

        for block in blocks:
            dt = parse_datetime_text(block.timepat)
            if dt is None:
                skipped += 1
                logger.warning(f"跳过时间无法解析的消息块: {block.timepat} {block.sender}")
                continue

            text = block.text()
            if block.sender_id not in SYSTEM_QQ_NUMBERS:
                existing = members_by_id.get(block.sender_id)
                if existing is None:
                    members_by_id[block.sender_id] = Member(platform_id=block.sender_id, name=block.sender)
                else:
                    # 展示名可变：保留最新的名字
                    existing.name = block.sender

            messages.append(
                Message(
                    sender_platform_id=block.sender_id,
                    sender_name=block.sender,
                    timestamp=datetime_to_epoch(dt, self.timestamp_mode),
                    type=_message_type(block.sender_id, text),
                    content=text,
                )
            )

        if not messages:
            raise self._fail("没有可解析的消息块")

        members = list(members_by_id.values())
        meta = ConversationMeta(
            name=target_label or filename_stem(filename),
            platform=ChatPlatform.QQ,
            type=self._infer_chat_type(group_label, members),
        )

        if skipped:
            logger.info(f"QQ TXT 共跳过 {skipped} 个异常消息块")
        return ParseResult(meta=meta, members=members, messages=messages)

    @staticmethod
    def _infer_chat_type(group_label: Optional[str], members: List[Member]) -> ChatType:
        # 消息分组 为“我的群聊”等含“群”字的分组时是群聊，其余分组（好友分组）是私聊
        if group_label:
            return ChatType.GROUP if '群' in group_label else ChatType.PRIVATE
        # 没有抬头时按人数兜底
        if len(members) == 2:
            return ChatType.PRIVATE
        return ChatType.GROUP
