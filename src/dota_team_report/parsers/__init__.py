"""上游 JSON 字段解析与类型转换。"""
from .values import nvl_int, to_bool, to_int, to_long

__all__ = ["to_int", "to_long", "to_bool", "nvl_int"]
