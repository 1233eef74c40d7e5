"""静态数据与聚合模型。"""
from .models import HeroAgg, PlayerAgg
from .objectives import OBJECTIVE_BY_ID, objective_name

__all__ = ["OBJECTIVE_BY_ID", "objective_name", "PlayerAgg", "HeroAgg"]
