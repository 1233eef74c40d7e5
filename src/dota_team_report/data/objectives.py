"""建筑/中立目标 npcId -> 名称，用于标注 towerDeaths。"""
from __future__ import annotations

_LANES = ("Top", "Mid", "Bot")


def _towers(first_id: int, side: str) -> dict[int, str]:
    # T1-T3 按 Top/Mid/Bot 依次编号，最后一个是 T4
    names = {}
    npc_id = first_id
    for tier in (1, 2, 3):
        for lane in _LANES:
            names[npc_id] = f"{side} Tower T{tier} {lane}"
            npc_id += 1
    names[npc_id] = f"{side} Tower T4"
    return names


def _barracks(first_id: int, side: str) -> dict[int, str]:
    names = {}
    npc_id = first_id
    for kind in ("Melee", "Range"):
        for lane in _LANES:
            names[npc_id] = f"{side} {kind} Rax {lane}"
            npc_id += 1
    return names


OBJECTIVE_BY_ID: dict[int, str] = {
    133: "Roshan",
    134: "Roshan (Halloween)",
    135: "Roshan Minion (seasonal)",
    **_towers(16, "Radiant"),
    **_towers(26, "Dire"),
    **_barracks(38, "Radiant"),
    **_barracks(44, "Dire"),
    50: "Radiant Ancient",
    51: "Dire Ancient",
    822: "Watch Tower",
    864: "Twin Gate",
    888: "Lotus Pool",
    861: "Tormentor",
    890: "Tormentor Minion (ignore for kill attribution)",
}


def objective_name(npc_id: int) -> str:
    """返回目标名称；未收录的 id 返回 "npc#<id>"。"""
    return OBJECTIVE_BY_ID.get(npc_id, f"npc#{npc_id}")
