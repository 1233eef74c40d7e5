"""均值/中位数；空序列返回 0.0，不修改输入。"""
from __future__ import annotations

from typing import Iterable


def average(values: Iterable[int]) -> float:
    xs = list(values)
    if not xs:
        return 0.0
    return sum(xs) / float(len(xs))


def median(values: Iterable[int]) -> float:
    xs = sorted(values)
    n = len(xs)
    if n == 0:
        return 0.0
    if n % 2 == 1:
        return float(xs[n // 2])
    return (xs[n // 2 - 1] + xs[n // 2]) / 2.0


def summarize(values: Iterable[int]) -> dict[str, float]:
    """{"average": ..., "median": ...}"""
    xs = list(values)
    return {"average": average(xs), "median": median(xs)}
