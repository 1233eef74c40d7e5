#!/usr/bin/env python3
"""命令行入口：拉取战队原始数据、选手生涯数据，按联赛生成战队/选手统计。"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .api import StratzClient
from .config import get_output_dir, load_config
from .pipeline import (
    analyze_directory,
    fetch_players_career,
    fetch_teams,
    load_career_index,
)


def _require_token(client: StratzClient) -> bool:
    if client.api_token:
        return True
    print("未配置 STRATZ token。请设置环境变量 STRATZ_API_TOKEN，或在 config.yaml 的 stratz.api_token 中填写。")
    return False


def cmd_fetch(args: argparse.Namespace) -> int:
    """拉取各战队近期比赛，原样写入 raw 目录（每队一个 JSON）。"""
    cfg = load_config()
    tcfg = cfg["tournament"]
    team_ids = args.team_id or tcfg.get("team_ids") or []
    if not team_ids:
        print("没有可用的战队 ID。")
        return 1
    out_dir = Path(args.out_dir) if args.out_dir else get_output_dir("raw_dir")
    take = args.take if args.take is not None else tcfg.get("matches_take", 100)
    skip = args.skip if args.skip is not None else tcfg.get("matches_skip", 0)
    workers = args.workers or cfg.get("workers", 4)

    client = StratzClient()
    if not _require_token(client):
        return 1
    print(f"正在拉取 {len(team_ids)} 支战队的比赛...")
    report = fetch_teams(client, team_ids, out_dir, take=take, skip=skip, workers=workers)
    print(f"已写入 {len(report.written)} 个文件到: {out_dir.resolve()}")
    for tid, err in report.failed.items():
        print(f"  失败 teamId={tid}: {err}")
    return 0 if report.written else 1


def cmd_career(args: argparse.Namespace) -> int:
    """收集 raw 目录中所有选手，拉取职业联赛生涯英雄表现。"""
    cfg = load_config()
    raw_dir = Path(args.raw_dir or cfg["output"]["raw_dir"])
    out_file = Path(args.output or cfg["output"]["career_file"])
    take_heroes = args.take_heroes or cfg["tournament"].get("take_heroes", 10)

    client = StratzClient()
    if not _require_token(client):
        return 1
    try:
        path = fetch_players_career(client, raw_dir, out_file, take_heroes=take_heroes)
    except ValueError as e:
        print(f"没有可用的选手 ID（{raw_dir} 下无原始数据？）: {e}")
        return 1
    except OSError as e:
        print(f"写入生涯数据失败: {e}")
        return 1
    print(f"选手生涯数据已写入: {path.resolve()}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """读取 raw 目录下的战队 JSON，按联赛过滤并写出分析结果。"""
    cfg = load_config()
    tournament_id = args.tournament_id or cfg["tournament"]["id"]
    in_dir = Path(args.in_dir or cfg["output"]["raw_dir"])
    out_dir = Path(args.out_dir) if args.out_dir else get_output_dir("analyzed_dir")
    workers = args.workers or cfg.get("workers", 4)

    career = None
    if args.career_file:
        try:
            career = load_career_index(args.career_file)
        except (OSError, ValueError) as e:
            print(f"读取生涯数据失败: {e}")
            return 1
        print(f"已加载 {len(career)} 名选手的生涯数据")

    report = analyze_directory(in_dir, out_dir, int(tournament_id), workers=workers, career_by_steam=career)
    if not report.written and not report.failed:
        print(f"{in_dir} 下没有原始 JSON。")
        return 1
    print(f"联赛 {tournament_id}: 已分析 {len(report.written)} 个文件 -> {out_dir.resolve()}")
    for name, err in report.failed.items():
        print(f"  失败 {name}: {err}")
    return 0 if report.written else 1


def cmd_run(args: argparse.Namespace) -> int:
    """依次执行 fetch、career、analyze。"""
    cfg = load_config()
    raw_dir = args.out_dir or cfg["output"]["raw_dir"]
    fetch_args = argparse.Namespace(
        team_id=args.team_id, out_dir=raw_dir, take=args.take, skip=None, workers=args.workers
    )
    rc = cmd_fetch(fetch_args)
    if rc != 0:
        return rc

    career_file = None
    if not args.skip_career:
        career_file = cfg["output"]["career_file"]
        career_args = argparse.Namespace(raw_dir=raw_dir, output=career_file, take_heroes=None)
        if cmd_career(career_args) != 0:
            print("生涯数据拉取失败，继续分析（不附加 proCareer）。")
            career_file = None

    analyze_args = argparse.Namespace(
        tournament_id=args.tournament_id,
        in_dir=raw_dir,
        out_dir=None,
        workers=args.workers,
        career_file=career_file,
    )
    return cmd_analyze(analyze_args)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dota 2 联赛战队统计：胜负、时长、击杀/死亡、选手拿手英雄")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    sub = parser.add_subparsers(dest="command", help="子命令")

    # fetch
    p_fetch = sub.add_parser("fetch", help="拉取战队原始比赛数据")
    p_fetch.add_argument("--team-id", type=int, action="append", default=None, help="战队 ID，可重复；默认取配置")
    p_fetch.add_argument("--take", type=int, default=None, help="每队拉取的比赛场数")
    p_fetch.add_argument("--skip", type=int, default=None, help="跳过最近的场数")
    p_fetch.add_argument("--out-dir", type=str, default=None, help="原始 JSON 输出目录")
    p_fetch.add_argument("--workers", type=int, default=None, help="并发数")
    p_fetch.set_defaults(run=cmd_fetch)

    # career
    p_career = sub.add_parser("career", help="拉取选手职业联赛生涯英雄表现")
    p_career.add_argument("--raw-dir", type=str, default=None, help="原始 JSON 目录")
    p_career.add_argument("-o", "--output", type=str, default=None, help="输出 JSON 路径")
    p_career.add_argument("--take-heroes", type=int, default=None, help="每名选手取前 N 个英雄")
    p_career.set_defaults(run=cmd_career)

    # analyze
    p_analyze = sub.add_parser("analyze", help="按联赛分析原始 JSON")
    p_analyze.add_argument("--tournament-id", type=int, default=None, help="联赛 ID")
    p_analyze.add_argument("--in-dir", type=str, default=None, help="原始 JSON 目录")
    p_analyze.add_argument("--out-dir", type=str, default=None, help="分析结果输出目录")
    p_analyze.add_argument("--workers", type=int, default=None, help="并发数")
    p_analyze.add_argument("--career-file", type=str, default=None, help="选手生涯 JSON，附加到每名选手")
    p_analyze.set_defaults(run=cmd_analyze)

    # run
    p_run = sub.add_parser("run", help="fetch + career + analyze")
    p_run.add_argument("--tournament-id", type=int, default=None, help="联赛 ID")
    p_run.add_argument("--team-id", type=int, action="append", default=None, help="战队 ID，可重复")
    p_run.add_argument("--take", type=int, default=None, help="每队拉取的比赛场数")
    p_run.add_argument("--out-dir", type=str, default=None, help="原始 JSON 输出目录")
    p_run.add_argument("--workers", type=int, default=None, help="并发数")
    p_run.add_argument("--skip-career", action="store_true", help="不拉取选手生涯数据")
    p_run.set_defaults(run=cmd_run)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    if not args.command:
        parser.print_help()
        return 0
    return args.run(args)


if __name__ == "__main__":
    sys.exit(main())
