"""批处理：拉取各战队原始 JSON -> 选手生涯数据 -> 按联赛分析并写出。

每支战队/每个文件独立处理，单个失败只记录日志，不影响其他。
"""
from __future__ import annotations

import copy
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import requests

from .analyzers.team import analyze_team
from .api.stratz import StratzAPIError, StratzClient, to_steam32
from .export import analyzed_file_name, read_json, team_file_name, write_json
from .parsers.values import to_long

logger = logging.getLogger(__name__)

RECOVERABLE_ERRORS = (requests.RequestException, StratzAPIError, OSError, ValueError)


@dataclass
class RunReport:
    """一次批处理的结果：成功写出的文件与失败项（key -> 错误信息）。"""
    written: list[Path] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return bool(self.written) and not self.failed


def dump_team_raw(
    client: StratzClient, team_id: int, out_dir: str | Path, take: int = 100, skip: int = 0
) -> Path:
    """拉取单支战队原始数据并写到 out_dir/<teamId>_<name>.json，不做任何修改。"""
    resp = client.get_team_matches(team_id, take=take, skip=skip)
    return write_json(resp, Path(out_dir) / team_file_name(resp, team_id))


def fetch_teams(
    client: StratzClient,
    team_ids: Iterable[int],
    out_dir: str | Path,
    take: int = 100,
    skip: int = 0,
    workers: int = 4,
) -> RunReport:
    report = RunReport()
    ids = list(team_ids)
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        futures = {
            executor.submit(dump_team_raw, client, tid, out_dir, take, skip): tid for tid in ids
        }
        for future in as_completed(futures):
            tid = futures[future]
            try:
                path = future.result()
            except RECOVERABLE_ERRORS as exc:
                logger.error("Failed to dump raw for teamId=%s : %s", tid, exc)
                report.failed[str(tid)] = str(exc)
                continue
            logger.info("Wrote %s", path.resolve())
            report.written.append(path)
    # 与线程完成顺序无关：文件按名称，失败项按输入顺序
    order = {str(tid): i for i, tid in enumerate(ids)}
    report.written.sort(key=lambda p: p.name)
    report.failed = dict(sorted(report.failed.items(), key=lambda kv: order.get(kv[0], 0)))
    return report


def iter_raw_files(in_dir: str | Path) -> list[Path]:
    """目录下的原始 JSON（跳过已分析的 *-analyzed.json）。"""
    d = Path(in_dir)
    if not d.is_dir():
        return []
    return sorted(p for p in d.glob("*.json") if not p.name.endswith("-analyzed.json"))


def _analyze_one(
    raw_path: Path,
    out_dir: Path,
    tournament_id: int,
    career_by_steam: dict[int, dict[str, Any]] | None,
) -> Path:
    doc = read_json(raw_path)
    analyzed = analyze_team(doc, tournament_id)
    if career_by_steam:
        attach_career(analyzed, career_by_steam)
    return write_json(analyzed, out_dir / analyzed_file_name(raw_path.name))


def analyze_directory(
    in_dir: str | Path,
    out_dir: str | Path,
    tournament_id: int,
    workers: int = 4,
    career_by_steam: dict[int, dict[str, Any]] | None = None,
) -> RunReport:
    """分析 in_dir 下每个原始文件，写到 out_dir/<name>-analyzed.json。"""
    report = RunReport()
    files = iter_raw_files(in_dir)
    out = Path(out_dir)
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        futures = {
            executor.submit(_analyze_one, p, out, tournament_id, career_by_steam): p for p in files
        }
        for future in as_completed(futures):
            p = futures[future]
            try:
                path = future.result()
            except RECOVERABLE_ERRORS as exc:
                logger.error("Failed to analyze %s : %s", p, exc)
                report.failed[str(p)] = str(exc)
                continue
            logger.info("Wrote %s", path.resolve())
            report.written.append(path)
    order = {str(p): i for i, p in enumerate(files)}
    report.written.sort(key=lambda p: p.name)
    report.failed = dict(sorted(report.failed.items(), key=lambda kv: order.get(kv[0], 0)))
    return report


def _iter_player_slots(doc: Any) -> Iterable[dict[str, Any]]:
    data = doc.get("data") if isinstance(doc, dict) else None
    team = data.get("team") if isinstance(data, dict) else None
    matches = team.get("matches") if isinstance(team, dict) else None
    for m in matches if isinstance(matches, list) else []:
        players = m.get("players") if isinstance(m, dict) else None
        for p in players if isinstance(players, list) else []:
            if isinstance(p, dict):
                yield p


def _slot_steam_id(slot: dict[str, Any]) -> int | None:
    account = slot.get("steamAccount")
    if not isinstance(account, dict):
        return None
    return to_long(account.get("id"))


def collect_steam_ids(docs: Iterable[Any]) -> list[int]:
    """所有比赛中出现过的 steamAccount.id，去重并保持首次出现顺序。"""
    ids: dict[int, None] = {}
    for doc in docs:
        for slot in _iter_player_slots(doc):
            sid = _slot_steam_id(slot)
            if sid is not None:
                ids.setdefault(sid, None)
    return list(ids)


def collect_steam_ids_from_dir(raw_dir: str | Path) -> list[int]:
    docs = []
    for p in iter_raw_files(raw_dir):
        try:
            docs.append(read_json(p))
        except (OSError, ValueError) as exc:
            logger.error("Skip unreadable %s : %s", p, exc)
    return collect_steam_ids(docs)


def fetch_players_career(
    client: StratzClient, raw_dir: str | Path, out_file: str | Path, take_heroes: int = 10
) -> Path:
    """收集 raw_dir 中所有选手 steam id，拉取生涯英雄表现并写到 out_file。"""
    steam_ids = collect_steam_ids_from_dir(raw_dir)
    logger.info("Collected Steam IDs: %d", len(steam_ids))
    merged = client.get_players_career(steam_ids, take_heroes=take_heroes)
    return write_json(merged, out_file)


def load_career_index(path: str | Path) -> dict[int, dict[str, Any]]:
    """读取 {"data": {"players": [...]}}，按 steam id 建索引。"""
    root = read_json(path)
    data = root.get("data") if isinstance(root, dict) else None
    players = data.get("players") if isinstance(data, dict) else None
    index: dict[int, dict[str, Any]] = {}
    for p in players if isinstance(players, list) else []:
        if not isinstance(p, dict):
            continue
        sid = _slot_steam_id(p)
        if sid is not None:
            index[to_steam32(sid)] = p
    return index


def attach_career(doc: dict[str, Any], career_by_steam: dict[int, dict[str, Any]]) -> int:
    """为每个有生涯数据的选手写入 proCareer（steamId/proName/heroesPerformance），返回写入次数。"""
    attached = 0
    for slot in _iter_player_slots(doc):
        sid = _slot_steam_id(slot)
        if sid is None:
            continue
        career = career_by_steam.get(to_steam32(sid))
        if career is None:
            continue
        account = slot.get("steamAccount") or {}
        pro = account.get("proSteamAccount")
        slot["proCareer"] = {
            "steamId": sid,
            "proName": pro.get("name") if isinstance(pro, dict) else None,
            "heroesPerformance": copy.deepcopy(career.get("heroesPerformance")),
        }
        attached += 1
    return attached
