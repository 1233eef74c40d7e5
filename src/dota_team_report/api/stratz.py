"""STRATZ GraphQL 客户端：战队近期比赛原始数据、选手职业生涯英雄表现。"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Iterable, Iterator

import requests

from ..config import load_config
from ..parsers.values import to_long

logger = logging.getLogger(__name__)

STEAM64_OFFSET = 76561197960265728

TEAM_WITH_MATCHES_QUERY = """
query GetTeamWithMatches($teamId: Int!, $take: Int!, $skip: Int!) {
  team(teamId: $teamId) {
    id
    name
    tag
    matches(request: { take: $take, skip: $skip }) {
      id
      startDateTime
      durationSeconds
      didRadiantWin
      radiantTeam { id name tag }
      direTeam    { id name tag }
      league { id displayName }

      towerStatusRadiant
      towerStatusDire
      barracksStatusRadiant
      barracksStatusDire

      towerDeaths { time npcId isRadiant }

      players {
        isRadiant
        isVictory
        kills
        deaths
        assists
        goldPerMinute
        experiencePerMinute
        networth

        playbackData {
          killEvents { time target }
          deathEvents {
            time
            attacker
            goldFed
            xpFed
            goldLost
            isFeed
            positionX
            positionY
          }
        }

        stats { itemPurchases { time itemId } }
        hero { id displayName }
        steamAccount {
          id
          name
          proSteamAccount { id name teamId }
        }
      }
    }
  }
  constants {
    items { id displayName name }
  }
}
"""

PLAYERS_CAREER_QUERY = """
query PlayersProAllTime($ids: [Long!]!, $takeHeroes: Int = 10) {
  players(steamAccountIds: $ids) {
    steamAccount { id proSteamAccount { id name } }
    heroesPerformance(
      request: { isLeague: true, matchGroupOrderBy: MATCH_COUNT, orderBy: DESC, take: 5000 },
      take: $takeHeroes
    ) {
      hero { id displayName }
      matchCount
      winCount
      avgKills
      avgDeaths
      avgAssists
      goldPerMinute
      experiencePerMinute
      lastPlayedDateTime
    }
  }
}
"""


class StratzAPIError(RuntimeError):
    pass


def to_steam32(steam_id: int) -> int:
    """Steam64 -> Steam32 account id；已是 32 位的原样返回。"""
    return steam_id - STEAM64_OFFSET if steam_id >= STEAM64_OFFSET else steam_id


def normalize_steam_ids(raw: Iterable[Any] | None) -> list[int]:
    """去掉空值、转为 Steam32 并去重（保持首次出现顺序）。"""
    if raw is None:
        return []
    seen: set[int] = set()
    ids: list[int] = []
    for value in raw:
        sid = to_long(value)
        if sid is None:
            continue
        sid = to_steam32(sid)
        if sid in seen:
            continue
        seen.add(sid)
        ids.append(sid)
    return ids


def chunked(items: list[Any], size: int) -> Iterator[list[Any]]:
    if size <= 0:
        raise ValueError("size must be positive")
    for i in range(0, len(items), size):
        yield items[i:i + size]


def _player_steam_id(player: Any) -> int | None:
    if not isinstance(player, dict):
        return None
    account = player.get("steamAccount")
    if not isinstance(account, dict):
        return None
    return to_long(account.get("id"))


class StratzClient:
    """STRATZ GraphQL 封装；每次请求之间按 rate_limit_delay 节流。"""

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        rate_limit_delay: float | None = None,
        max_ids_per_request: int | None = None,
        session: requests.Session | None = None,
    ):
        cfg = load_config()
        sz = cfg.get("stratz", {})
        self.base_url = base_url or sz.get("base_url", "https://api.stratz.com/graphql")
        self.api_token = api_token if api_token is not None else sz.get("api_token", "")
        self.delay = rate_limit_delay if rate_limit_delay is not None else sz.get("rate_limit_delay", 0.2)
        self.max_ids = max_ids_per_request or sz.get("max_ids_per_request", 5)
        self.timeout = sz.get("timeout", 30)
        self.user_agent = sz.get("user_agent", "STRATZ_API")
        # 未注入 session 时每个线程各建一个（requests.Session 不保证线程安全）
        self._session = session
        self._local = threading.local()
        self._last_request_time = 0.0
        self._lock = threading.Lock()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        # 多线程共用同一客户端时串行化节流
        with self._lock:
            now = time.monotonic()
            wait = self.delay - (now - self._last_request_time)
            if wait > 0:
                time.sleep(wait)
            self._last_request_time = time.monotonic()
        r = self._get_session().post(
            self.base_url,
            json={"query": query, "variables": variables},
            headers=self._headers(),
            timeout=self.timeout,
        )
        r.raise_for_status()
        try:
            payload = r.json()
        except ValueError as exc:
            raise StratzAPIError(f"Non-JSON response from STRATZ: {exc}") from exc
        if not isinstance(payload, dict):
            raise StratzAPIError(f"Unexpected STRATZ response type: {type(payload).__name__}")
        return payload

    def get_team_matches(self, team_id: int, take: int = 100, skip: int = 0) -> dict[str, Any]:
        """战队 + 近期比赛的原始返回（不做任何过滤）。"""
        resp = self._post(TEAM_WITH_MATCHES_QUERY, {"teamId": team_id, "take": take, "skip": skip})
        errors = resp.get("errors")
        if errors and resp.get("data") is None:
            raise StratzAPIError(f"GraphQL errors for team {team_id}: {errors}")
        if errors:
            logger.warning("GraphQL errors for team %s: %s", team_id, errors)
        return resp

    def get_players_career(self, steam_ids: Iterable[Any], take_heroes: int = 10) -> dict[str, Any]:
        """
        批量获取选手联赛生涯英雄表现。STRATZ 每次最多 5 个 id，按片请求；
        某一片失败只记录日志，不中断。结果按 steamAccount.id 去重（后出现的覆盖）。
        """
        ids = normalize_steam_ids(steam_ids)
        if not ids:
            raise ValueError("steam_ids is empty")

        all_players: list[dict[str, Any]] = []
        for piece in chunked(ids, self.max_ids):
            try:
                resp = self._post(PLAYERS_CAREER_QUERY, {"ids": piece, "takeHeroes": take_heroes})
            except (requests.RequestException, StratzAPIError) as exc:
                logger.error("Request failed for slice %s: %s", piece, exc)
                continue
            errors = resp.get("errors")
            if errors:
                logger.error("GraphQL errors for slice %s -> %s", piece, errors)
            data = resp.get("data")
            if not isinstance(data, dict):
                continue
            players = data.get("players")
            if isinstance(players, list):
                all_players.extend(players)

        by_id: dict[int, dict[str, Any]] = {}
        for p in all_players:
            sid = _player_steam_id(p)
            if sid is not None:
                by_id[sid] = p
        return {"data": {"players": list(by_id.values())}}
