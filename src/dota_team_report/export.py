"""JSON 读写与战队文件命名。"""
from __future__ import annotations

import json
import re
import unicodedata
from pathlib import Path
from typing import Any

from .parsers.values import to_long

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")
_UNDERSCORES = re.compile(r"_+")


def sanitize_name(s: str) -> str:
    """去掉重音、非 [A-Za-z0-9._-] 字符替换为 "_"；结果为空时返回 "team"。"""
    n = unicodedata.normalize("NFD", s)
    n = "".join(ch for ch in n if not unicodedata.category(ch).startswith("M"))
    n = _UNSAFE.sub("_", n)
    n = _UNDERSCORES.sub("_", n).strip("_")
    return n or "team"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def team_display_name(team: dict[str, Any] | None) -> str:
    """优先队名，其次简称，否则 "team"。"""
    team = team or {}
    name = _text(team.get("name"))
    if name.strip():
        return name
    tag = _text(team.get("tag"))
    if tag.strip():
        return tag
    return "team"


def team_file_name(doc: dict[str, Any], fallback_team_id: int) -> str:
    """<teamId>_<name>.json；team id 取返回里的值，缺失时用请求的 id。"""
    data = doc.get("data") if isinstance(doc, dict) else None
    team = data.get("team") if isinstance(data, dict) else None
    team = team if isinstance(team, dict) else None
    team_id = to_long(team.get("id")) if team else None
    if team_id is None:
        team_id = fallback_team_id
    return f"{team_id}_{sanitize_name(team_display_name(team))}.json"


def analyzed_file_name(raw_name: str) -> str:
    return f"{Path(raw_name).stem}-analyzed.json"


def write_json(obj: Any, path: str | Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    return out_path


def read_json(path: str | Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)
