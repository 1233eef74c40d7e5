"""Dota 2 职业联赛战队数据：拉取 STRATZ 原始数据、按联赛统计战队与选手表现。"""
__version__ = "0.1.0"
