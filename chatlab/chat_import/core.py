"""聊天导入层：通用核心逻辑（纯函数/小工具）。

这里聚合：
- 身份规则（uid/uin 合并）
- 时间戳规则（ISO / 秒 / 毫秒 -> epoch 秒）
- 文件名小工具

说明：
- 这里的函数都不做 I/O，也不持有状态，检测器和解析器都可以直接复用
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Optional

from .schema import safe_int


# -------------------------
# 身份规则（uid/uin 合并）
# -------------------------


def norm_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s if s else None


def participant_id_from_uid_uin(uid: Any = None, uin: Any = None, fallback_name: Any = None) -> str:
    """生成稳定的参与者标识。

    约定：
    - QQ JSON：uid 一定存在，因此标识应当等同于 uid
    - QQ TXT：通常只有 uin（或邮箱），因此标识等同于 uin
    """

    uid_s = norm_str(uid)
    if uid_s:
        return uid_s

    uin_s = norm_str(uin)
    if uin_s:
        return uin_s

    return norm_str(fallback_name) or "unknown"


def looks_like_number(s: Optional[str]) -> bool:
    if not s:
        return False
    return s.strip().isdigit()


# -------------------------
# 时间戳规则
# -------------------------


_SECONDS_UPPER = 10_000_000_000
_MILLIS_UPPER = 10_000_000_000_000_000


def datetime_to_epoch(dt: datetime, mode: str) -> int:
    if mode == "wysiwyg":
        # 所见即所得：丢弃时区标记，按 UTC 计算
        return int(dt.replace(tzinfo=timezone.utc).timestamp())
    # naive 的 datetime.timestamp() 会用本机时区解释
    return int(dt.timestamp())


def parse_datetime_text(text: str) -> Optional[datetime]:
    """解析时间字符串（兼容多种格式）。

    支持：
    - "YYYY-MM-DD HH:MM:SS"（小时允许 1 位，TXT 导出常见）
    - ISO-8601 变体（含时区/毫秒）
    - 末尾带 'Z' 的 ISO-8601
    """

    if not text:
        return None

    ts = str(text).strip()
    if not ts:
        return None

    if ts.endswith('Z'):
        ts = ts[:-1] + '+00:00'

    try:
        return datetime.fromisoformat(ts)
    except ValueError:
        pass

    try:
        return datetime.strptime(ts, '%Y-%m-%d %H:%M:%S')
    except ValueError:
        pass

    # 补齐单数字小时
    parts = ts.split(' ')
    if len(parts) == 2:
        date_part, time_part = parts
        t = time_part.split(':')
        if len(t) == 3 and t[0].isdigit():
            try:
                return datetime.fromisoformat(f"{date_part} {int(t[0]):02d}:{t[1]}:{t[2]}")
            except ValueError:
                return None

    return None


def to_epoch_seconds(value: Any, mode: str = "utc_to_local") -> Optional[int]:
    """把导出时间戳统一为 epoch 秒；无法解析时返回 None。

    支持：
    - ISO / "YYYY-MM-DD HH:MM:SS" 字符串（语义由 mode 决定）
    - 秒/毫秒数字（int/float/str），< 1e10 认为是秒，其余按毫秒
    """

    if isinstance(value, bool):
        return None

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if not looks_like_number(s):
            dt = parse_datetime_text(s)
            if dt is None:
                return None
            return datetime_to_epoch(dt, mode)
        value = safe_int(s)

    if isinstance(value, float):
        value = int(value)

    if not isinstance(value, int) or value < 0:
        return None

    if value < _SECONDS_UPPER:
        return value

    if value < _MILLIS_UPPER:
        return value // 1000

    return None


# -------------------------
# 文件名
# -------------------------


def has_suffix(filename: str, *suffixes: str) -> bool:
    name = (filename or "").lower()
    return any(name.endswith(s) for s in suffixes)


def filename_stem(filename: str) -> str:
    """去掉目录与扩展名（.chatlab.json 这类双扩展名也一并去掉）。"""

    base = os.path.basename(filename or "")
    for suffix in (".chatlab.json", ".json", ".txt"):
        if base.lower().endswith(suffix):
            return base[: -len(suffix)]
    return os.path.splitext(base)[0]
