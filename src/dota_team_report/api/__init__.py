"""STRATZ GraphQL 客户端。"""
from .stratz import StratzAPIError, StratzClient

__all__ = ["StratzClient", "StratzAPIError"]
