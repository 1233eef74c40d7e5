"""单支战队原始 JSON -> 按联赛过滤后的比赛 + 战队/选手聚合。

输入为 STRATZ team 查询的原始返回（{"data": {"team": {...}}}），输出为同一结构：
team.matches 替换为联赛内比赛（towerDeaths 增加 npcName），
并附加 team.aggregates 与 team.playerAggregates。
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..data.models import HeroAgg, PlayerAgg
from ..data.objectives import objective_name
from ..parsers.values import nvl_int, to_bool, to_int
from .stats import summarize

logger = logging.getLogger(__name__)

UNKNOWN_PLAYER = "Unknown"
BEST_HEROES_LIMIT = 3


def _as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _as_list(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def filter_league_matches(matches: list[Any], tournament_id: int) -> list[dict[str, Any]]:
    """只保留 league.id == tournament_id 的比赛，保持原顺序。"""
    kept = []
    for m in matches:
        if not isinstance(m, dict):
            continue
        league = _as_dict(m.get("league"))
        if league is not None and to_int(league.get("id")) == tournament_id:
            kept.append(m)
    return kept


def label_tower_deaths(match: dict[str, Any]) -> None:
    """为 towerDeaths 中每个带 npcId 的事件写入 npcName。"""
    for ev in _as_list(match.get("towerDeaths")) or []:
        if not isinstance(ev, dict):
            continue
        npc_id = to_int(ev.get("npcId"))
        if npc_id is None:
            continue
        ev["npcName"] = objective_name(npc_id)


def player_display_name(slot: dict[str, Any]) -> str:
    account = _as_dict(slot.get("steamAccount")) or {}
    pro = _as_dict(account.get("proSteamAccount")) or {}
    name = pro.get("name")
    if isinstance(name, str) and name:
        return name
    return UNKNOWN_PLAYER


def _team_side(match: dict[str, Any], team_id: int | None) -> str | None:
    """返回 "radiant" / "dire"；无法判断时返回 None。"""
    radiant = _as_dict(match.get("radiantTeam"))
    dire = _as_dict(match.get("direTeam"))
    radiant_id = to_int(radiant.get("id")) if radiant else None
    dire_id = to_int(dire.get("id")) if dire else None
    if team_id is None or radiant_id is None or dire_id is None:
        return None
    if team_id == radiant_id:
        return "radiant"
    if team_id == dire_id:
        return "dire"
    return None


def _hero_sort_key(hero: HeroAgg) -> tuple[float, int, str]:
    # 胜率降序 -> 场次降序 -> 英雄名升序
    return (-hero.win_rate, -hero.matches, hero.hero_name or "")


def rank_heroes(heroes: list[HeroAgg], limit: int = BEST_HEROES_LIMIT) -> list[HeroAgg]:
    return sorted(heroes, key=_hero_sort_key)[:limit]


def _hero_to_dict(hero: HeroAgg) -> dict[str, Any]:
    return {
        "heroId": hero.hero_id,
        "heroName": hero.hero_name,
        "matches": hero.matches,
        "wins": hero.wins,
        "winRate": hero.win_rate,
        "kills": summarize(hero.kills),
        "deaths": summarize(hero.deaths),
    }


def _player_to_dict(player: PlayerAgg) -> dict[str, Any]:
    return {
        "playerName": player.player_name,
        "matchesCount": player.matches,
        "wins": player.wins,
        "kills": summarize(player.kills),
        "deaths": summarize(player.deaths),
        "bestHeroes": [_hero_to_dict(h) for h in rank_heroes(list(player.heroes.values()))],
    }


def aggregate_matches(
    matches: list[dict[str, Any]], team_id: int | None
) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """对已过滤的比赛做一次遍历，返回 (战队聚合, 选手聚合列表)。"""
    wins = 0
    losses = 0
    durations: list[int] = []
    team_kills: list[int] = []
    team_deaths: list[int] = []
    per_player: dict[str, PlayerAgg] = {}

    for m in matches:
        side = _team_side(m, team_id)
        if side is None:
            logger.debug("比赛 %s 不属于战队 %s，跳过统计", m.get("id"), team_id)
            continue
        is_radiant_team = side == "radiant"

        radiant_win = to_bool(m.get("didRadiantWin"))
        if radiant_win is not None:
            if radiant_win == is_radiant_team:
                wins += 1
            else:
                losses += 1

        duration = to_int(m.get("durationSeconds"))
        if duration is not None:
            durations.append(duration)

        kills_sum = 0
        deaths_sum = 0
        for p in _as_list(m.get("players")) or []:
            if not isinstance(p, dict):
                continue
            is_radiant = to_bool(p.get("isRadiant"))
            if is_radiant is None or is_radiant != is_radiant_team:
                continue

            kills = nvl_int(p.get("kills"))
            deaths = nvl_int(p.get("deaths"))
            kills_sum += kills
            deaths_sum += deaths
            victory = to_bool(p.get("isVictory")) is True

            name = player_display_name(p)
            player = per_player.get(name)
            if player is None:
                player = per_player[name] = PlayerAgg(player_name=name)
            player.add(kills, deaths, victory)

            hero = _as_dict(p.get("hero"))
            hero_id = to_int(hero.get("id")) if hero else None
            if hero_id is not None:
                hero_name = hero.get("displayName")
                hero_name = "" if hero_name is None else str(hero_name)
                player.hero(hero_id, hero_name).add(kills, deaths, victory)

        team_kills.append(kills_sum)
        team_deaths.append(deaths_sum)

    team_agg = {
        "matchesCount": len(matches),
        "wins": wins,
        "losses": losses,
        "durationSeconds": summarize(durations),
        "kills": summarize(team_kills),
        "deaths": summarize(team_deaths),
    }
    return team_agg, [_player_to_dict(p) for p in per_player.values()]


def analyze_team(doc: dict[str, Any], tournament_id: int) -> dict[str, Any]:
    """分析单支战队文档（原地修改并返回）。"""
    data = _as_dict(doc.get("data")) if isinstance(doc, dict) else None
    if data is None:
        return {"data": {}}
    team = _as_dict(data.get("team"))
    if team is None:
        return doc
    matches = _as_list(team.get("matches"))
    if matches is None:
        team["matches"] = []
        return doc

    filtered = filter_league_matches(matches, tournament_id)
    for m in filtered:
        label_tower_deaths(m)

    team_agg, player_aggs = aggregate_matches(filtered, to_int(team.get("id")))
    logger.debug(
        "战队 %s: 联赛 %s 内 %d/%d 场", team.get("id"), tournament_id, len(filtered), len(matches)
    )

    team["matches"] = filtered
    team["aggregates"] = team_agg
    team["playerAggregates"] = player_aggs
    return doc


def analyze_team_file(path: str | Path, tournament_id: int) -> dict[str, Any]:
    """读取原始 JSON 文件并分析。"""
    with open(path, encoding="utf-8") as f:
        doc = json.load(f)
    return analyze_team(doc, tournament_id)
