from __future__ import annotations

import json
from typing import Any, Dict, List

import requests

from dota_team_report.api.stratz import STEAM64_OFFSET, StratzAPIError
from dota_team_report.pipeline import (
    analyze_directory,
    attach_career,
    collect_steam_ids,
    collect_steam_ids_from_dir,
    dump_team_raw,
    fetch_players_career,
    fetch_teams,
    iter_raw_files,
    load_career_index,
)
from tests.helpers import LEAGUE_ID, build_doc, build_match, build_player


class FakeClient:
    def __init__(self, docs: Dict[int, Any]) -> None:
        self.docs = docs
        self.career_calls: List[List[int]] = []

    def get_team_matches(self, team_id: int, take: int = 100, skip: int = 0) -> dict:
        doc = self.docs[team_id]
        if isinstance(doc, Exception):
            raise doc
        return doc

    def get_players_career(self, steam_ids: List[int], take_heroes: int = 10) -> dict:
        ids = list(steam_ids)
        self.career_calls.append(ids)
        return {"data": {"players": [{"steamAccount": {"id": i}, "heroesPerformance": []} for i in ids]}}


def _team_doc(team_id: int, name: str, steam_ids: List[int]) -> dict:
    players = [build_player(1, 1, name=f"p{s}", steam_id=s) for s in steam_ids]
    doc = build_doc([build_match(team_id * 10, players=players, radiant_id=team_id)], team_id=team_id)
    doc["data"]["team"]["name"] = name
    return doc


def test_dump_team_raw_writes_unmodified_response(tmp_path) -> None:
    doc = _team_doc(36, "Natus Vincere", [1])
    path = dump_team_raw(FakeClient({36: doc}), 36, tmp_path)
    assert path.name == "36_Natus_Vincere.json"
    assert json.loads(path.read_text(encoding="utf-8")) == doc


def test_fetch_teams_continues_after_failures(tmp_path) -> None:
    client = FakeClient(
        {
            36: _team_doc(36, "Natus Vincere", [1]),
            2163: requests.ConnectionError("reset by peer"),
            9691969: StratzAPIError("GraphQL errors"),
            8255888: _team_doc(8255888, "BetBoom Team", [2]),
        }
    )
    report = fetch_teams(client, [36, 2163, 9691969, 8255888], tmp_path, workers=2)
    assert [p.name for p in report.written] == ["36_Natus_Vincere.json", "8255888_BetBoom_Team.json"]
    assert list(report.failed) == ["2163", "9691969"]
    assert not report.ok


def test_iter_raw_files_skips_analyzed(tmp_path) -> None:
    (tmp_path / "1_A.json").write_text("{}", encoding="utf-8")
    (tmp_path / "1_A-analyzed.json").write_text("{}", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    assert [p.name for p in iter_raw_files(tmp_path)] == ["1_A.json"]
    assert iter_raw_files(tmp_path / "missing") == []


def test_analyze_directory(tmp_path) -> None:
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "1_Falcons.json").write_text(json.dumps(_team_doc(1, "Falcons", [5])), encoding="utf-8")
    (raw / "2_Broken.json").write_text("{not json", encoding="utf-8")

    report = analyze_directory(raw, tmp_path / "analyzed", LEAGUE_ID, workers=2)
    assert [p.name for p in report.written] == ["1_Falcons-analyzed.json"]
    assert list(report.failed) == [str(raw / "2_Broken.json")]

    out = json.loads(report.written[0].read_text(encoding="utf-8"))
    assert out["data"]["team"]["aggregates"]["matchesCount"] == 1
    assert out["data"]["team"]["playerAggregates"][0]["playerName"] == "p5"


def test_collect_steam_ids_dedups_in_order(tmp_path) -> None:
    docs = [_team_doc(1, "A", [5, 6]), _team_doc(2, "B", [6, 7]), {"data": None}]
    docs[0]["data"]["team"]["matches"][0]["players"].append({"steamAccount": {"id": "8"}})
    assert collect_steam_ids(docs) == [5, 6, 8, 7]

    for i, doc in enumerate(docs[:2]):
        (tmp_path / f"{i}_t.json").write_text(json.dumps(doc), encoding="utf-8")
    (tmp_path / "9_bad.json").write_text("]", encoding="utf-8")
    assert collect_steam_ids_from_dir(tmp_path) == [5, 6, 8, 7]


def test_fetch_players_career(tmp_path) -> None:
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "1_A.json").write_text(json.dumps(_team_doc(1, "A", [5, 6])), encoding="utf-8")
    client = FakeClient({})

    out = fetch_players_career(client, raw, tmp_path / "career" / "players.json", take_heroes=3)
    assert client.career_calls == [[5, 6]]
    merged = json.loads(out.read_text(encoding="utf-8"))
    assert [p["steamAccount"]["id"] for p in merged["data"]["players"]] == [5, 6]


def test_attach_career(tmp_path) -> None:
    career_file = tmp_path / "career.json"
    career_file.write_text(
        json.dumps(
            {
                "data": {
                    "players": [
                        {"steamAccount": {"id": 5}, "heroesPerformance": [{"hero": {"id": 1}, "matchCount": 40}]},
                        {"steamAccount": {"id": None}},
                    ]
                }
            }
        ),
        encoding="utf-8",
    )
    index = load_career_index(career_file)
    assert list(index) == [5]

    doc = _team_doc(1, "A", [5, STEAM64_OFFSET + 5, 6])
    assert attach_career(doc, index) == 2
    players = doc["data"]["team"]["matches"][0]["players"]
    assert players[0]["proCareer"] == {
        "steamId": 5,
        "proName": "p5",
        "heroesPerformance": [{"hero": {"id": 1}, "matchCount": 40}],
    }
    assert players[1]["proCareer"]["steamId"] == STEAM64_OFFSET + 5
    assert "proCareer" not in players[2]


def test_analyze_directory_attaches_career(tmp_path) -> None:
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "1_A.json").write_text(json.dumps(_team_doc(1, "A", [5])), encoding="utf-8")
    index = {5: {"steamAccount": {"id": 5}, "heroesPerformance": []}}

    report = analyze_directory(raw, tmp_path / "out", LEAGUE_ID, career_by_steam=index)
    out = json.loads(report.written[0].read_text(encoding="utf-8"))
    assert out["data"]["team"]["matches"][0]["players"][0]["proCareer"]["steamId"] == 5


def test_analyze_directory_reports_failures_in_file_order(tmp_path) -> None:
    raw = tmp_path / "raw"
    raw.mkdir()
    names = ["1_A.json", "2_B.json", "3_C.json", "4_D.json", "5_E.json"]
    for name in names:
        (raw / name).write_text("{broken", encoding="utf-8")

    report = analyze_directory(raw, tmp_path / "analyzed", LEAGUE_ID, workers=5)
    assert report.written == []
    assert list(report.failed) == [str(raw / n) for n in names]
