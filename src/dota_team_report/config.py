"""加载 config.yaml 与默认配置。"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

_CONFIG: dict[str, Any] | None = None

TOKEN_ENV = "STRATZ_API_TOKEN"


def _default_config() -> dict[str, Any]:
    return {
        "stratz": {
            "base_url": "https://api.stratz.com/graphql",
            "api_token": "",
            "user_agent": "STRATZ_API",
            "rate_limit_delay": 0.2,
            "timeout": 30,
            "max_ids_per_request": 5,
        },
        "tournament": {
            # The International 2025
            "id": 18324,
            "team_ids": [
                36, 2163, 7119388, 7554697, 7732977, 8255888, 8261500, 8291895,
                9247354, 9303484, 9351740, 9467224, 9572001, 9640842, 9651185, 9691969,
            ],
            "matches_take": 100,
            "matches_skip": 0,
            "take_heroes": 10,
        },
        "output": {
            "raw_dir": "out/raw",
            "analyzed_dir": "out/analyzed",
            "career_file": "out/pro_career/players_pro_career.json",
        },
        "workers": 4,
    }


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """加载配置；若未提供路径则从项目根查找 config.yaml。环境变量 STRATZ_API_TOKEN 优先。"""
    global _CONFIG
    if _CONFIG is not None:
        return _CONFIG

    base = _default_config()

    if config_path is None:
        for root in [Path.cwd(), Path(__file__).resolve().parent.parent.parent]:
            p = root / "config.yaml"
            if p.is_file():
                config_path = p
                break

    if config_path and Path(config_path).is_file():
        with open(config_path, encoding="utf-8") as f:
            user = yaml.safe_load(f) or {}
        for key, value in user.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                base[key] = {**base[key], **value}
            else:
                base[key] = value

    token = os.environ.get(TOKEN_ENV, "").strip()
    if token:
        base["stratz"]["api_token"] = token

    _CONFIG = base
    return _CONFIG


def reset_config() -> None:
    global _CONFIG
    _CONFIG = None


def get_output_dir(kind: str) -> Path:
    """kind: raw_dir / analyzed_dir。"""
    cfg = load_config()
    out = Path(cfg["output"][kind])
    out.mkdir(parents=True, exist_ok=True)
    return out
