"""分析器：均值/中位数、战队与选手聚合。"""
from .stats import average, median, summarize
from .team import analyze_team, analyze_team_file, rank_heroes

__all__ = ["average", "median", "summarize", "analyze_team", "analyze_team_file", "rank_heroes"]
