"""STRATZ 返回的字段可能是数字、数字字符串或 null，这里统一转换；无法转换视为缺失。"""
from __future__ import annotations

import math
from typing import Any


def to_long(value: Any) -> int | None:
    """数字或数字字符串 -> int；bool、None、无法解析 -> None。"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def to_int(value: Any) -> int | None:
    return to_long(value)


def nvl_int(value: Any, default: int = 0) -> int:
    v = to_int(value)
    return default if v is None else v


def to_bool(value: Any) -> bool | None:
    """bool 原样返回；数字非 0 为 True；字符串只认 "true"/"false"（不区分大小写）。"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return value != 0
    if isinstance(value, str):
        s = value.strip().lower()
        if s == "true":
            return True
        if s == "false":
            return False
    return None
