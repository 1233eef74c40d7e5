"""聚合模型：选手、英雄的累计数据。"""
from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass
class HeroAgg:
    """某选手在某英雄上的累计数据。"""
    hero_id: int
    hero_name: str = ""
    matches: int = 0
    wins: int = 0
    kills: list[int] = field(default_factory=list)
    deaths: list[int] = field(default_factory=list)

    @property
    def win_rate(self) -> float:
        if self.matches <= 0:
            return 0.0
        rate = self.wins / self.matches
        return 0.0 if math.isnan(rate) else rate

    def add(self, kills: int, deaths: int, victory: bool) -> None:
        self.matches += 1
        if victory:
            self.wins += 1
        self.kills.append(kills)
        self.deaths.append(deaths)


@dataclass
class PlayerAgg:
    """选手在本联赛、本战队下的累计数据；heroes 按首次出现顺序保存。"""
    player_name: str
    matches: int = 0
    wins: int = 0
    kills: list[int] = field(default_factory=list)
    deaths: list[int] = field(default_factory=list)
    heroes: dict[int, HeroAgg] = field(default_factory=dict)

    def add(self, kills: int, deaths: int, victory: bool) -> None:
        self.matches += 1
        if victory:
            self.wins += 1
        self.kills.append(kills)
        self.deaths.append(deaths)

    def hero(self, hero_id: int, hero_name: str) -> HeroAgg:
        """取得（必要时创建）英雄聚合；名称只在首次创建时记录。"""
        agg = self.heroes.get(hero_id)
        if agg is None:
            agg = HeroAgg(hero_id=hero_id, hero_name=hero_name)
            self.heroes[hero_id] = agg
        return agg
