from __future__ import annotations

from typing import Any, Dict, List, Optional

TEAM_ID = 1
OPPONENT_ID = 2
LEAGUE_ID = 18324


def build_player(
    kills: Any,
    deaths: Any,
    is_victory: Any = True,
    is_radiant: Any = True,
    name: Optional[str] = None,
    hero_id: Optional[int] = None,
    hero_name: Optional[str] = None,
    steam_id: Optional[int] = None,
) -> dict:
    player: Dict[str, Any] = {
        "isRadiant": is_radiant,
        "isVictory": is_victory,
        "kills": kills,
        "deaths": deaths,
        "assists": 0,
        "steamAccount": {"id": steam_id, "name": "smurf"},
    }
    if name is not None:
        player["steamAccount"]["proSteamAccount"] = {"id": steam_id, "name": name}
    if hero_id is not None:
        player["hero"] = {"id": hero_id, "displayName": hero_name}
    return player


def build_match(
    match_id: int,
    players: Optional[List[dict]] = None,
    league_id: Optional[int] = LEAGUE_ID,
    duration: Any = 1800,
    radiant_win: Any = True,
    radiant_id: int = TEAM_ID,
    dire_id: int = OPPONENT_ID,
    tower_deaths: Optional[List[dict]] = None,
) -> dict:
    match: Dict[str, Any] = {
        "id": match_id,
        "startDateTime": 1757400000 + match_id,
        "durationSeconds": duration,
        "didRadiantWin": radiant_win,
        "radiantTeam": {"id": radiant_id, "name": f"Team {radiant_id}", "tag": f"T{radiant_id}"},
        "direTeam": {"id": dire_id, "name": f"Team {dire_id}", "tag": f"T{dire_id}"},
        "players": players or [],
    }
    if league_id is not None:
        match["league"] = {"id": league_id, "displayName": "The International 2025"}
    if tower_deaths is not None:
        match["towerDeaths"] = tower_deaths
    return match


def build_doc(matches: Optional[List[dict]], team_id: Any = TEAM_ID) -> dict:
    team: Dict[str, Any] = {"id": team_id, "name": "Team Falcons", "tag": "FLCN"}
    if matches is not None:
        team["matches"] = matches
    return {"data": {"team": team, "constants": {"items": []}}}
