from __future__ import annotations

import pytest

from dota_team_report.config import reset_config


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    # 不读取开发机上的 config.yaml / token
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STRATZ_API_TOKEN", raising=False)
    reset_config()
    yield
    reset_config()
