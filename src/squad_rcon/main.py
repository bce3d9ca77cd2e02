# src/squad_rcon/main.py
"""
squad-rcon 命令行入口 (CLI)

从命令行参数 / 环境变量 / .env 文件读取连接信息，执行一条子命令后退出。
核心库抛出的任何 RconError 都会打印错误信息并以非零状态码退出。
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from . import __version__
from .config import create_config_from_dict
from .exceptions import RconError
from .squad import SquadRcon

logger = logging.getLogger("SquadRconCLI")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_env_file(env_path: Optional[Path] = None) -> None:
    """
    加载 .env 文件到环境变量。
    未指定路径时在当前工作目录查找；文件不存在则仅使用现有环境变量。
    """
    env_path = env_path or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def build_parser() -> argparse.ArgumentParser:
    # -h 用于 --host，帮助信息只保留 --help
    parser = argparse.ArgumentParser(
        prog="squad-rcon",
        description="Squad 服务器命令行管理工具",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="显示帮助信息并退出")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-h",
        "--host",
        metavar="HOST",
        default=os.environ.get("SQUAD_RCON_HOST"),
        help="RCON 服务器地址，格式 ADDR:PORT (环境变量 SQUAD_RCON_HOST)",
    )
    parser.add_argument(
        "-p",
        "--password",
        metavar="PASSWORD",
        default=os.environ.get("SQUAD_RCON_PASS"),
        help="RCON 密码 (环境变量 SQUAD_RCON_PASS)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=os.environ.get("SQUAD_RCON_TIMEOUT") or None,
        help="读写超时秒数，默认无限等待",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.add_parser("monitor", help="持续打印服务器推送的消息")
    sub.add_parser("players", help="列出在线玩家")
    sub.add_parser("teams", help="列出队伍")
    sub.add_parser("squads", help="列出小队")
    sub.add_parser("list_maps", help="列出地图轮换")
    sub.add_parser("maps", help="显示当前地图与下一张地图")

    p = sub.add_parser("ban", help="封禁玩家")
    p.add_argument("name", metavar="PLAYER", help="玩家昵称或 SteamID")
    p.add_argument("duration", metavar="DURATION", help="例如 1d (一天)、1m (一个月)、0 (永久)")
    p.add_argument("reason", metavar="REASON", help="封禁原因")

    p = sub.add_parser("kick", help="将玩家踢出服务器")
    p.add_argument("name", metavar="PLAYER", help="玩家昵称或 SteamID")
    p.add_argument("reason", metavar="REASON", help="踢出原因")

    p = sub.add_parser("set_next_map", help="设置下一张地图")
    p.add_argument("map", metavar="MAP")

    p = sub.add_parser("change_map", help="立即结束当前对局并切换地图")
    p.add_argument("map", metavar="MAP")

    p = sub.add_parser("broadcast", help="向全服广播消息")
    p.add_argument("message", metavar="MESSAGE")

    p = sub.add_parser("raw", help="发送原始命令")
    p.add_argument("raw_command", metavar="COMMAND")

    return parser


async def run(rcon: SquadRcon, args: argparse.Namespace) -> None:
    """执行子命令并把结果打印到标准输出。"""
    cmd = args.command

    if cmd == "players":
        for player in await rcon.players():
            squad = player.squad_id if player.squad_id is not None else "N/A"
            print(f"{player.name} - {player.steam_id} - {player.team_id} - {squad}")
    elif cmd == "teams":
        for team in await rcon.teams():
            print(f"{team.id}: {team.name}")
    elif cmd == "squads":
        _, squads = await rcon.squads()
        for squad in squads:
            print(f"{squad.id}: {squad.name} ({squad.size} players)")
    elif cmd == "list_maps":
        for map_name in await rcon.list_maps():
            print(map_name)
    elif cmd == "maps":
        current_map, next_map = await rcon.maps()
        print(f"Current map: {current_map}")
        print(f"Next map: {next_map}")
    elif cmd == "raw":
        print(await rcon.raw_command(args.raw_command))
    elif cmd == "broadcast":
        print(await rcon.broadcast(args.message))
    elif cmd == "set_next_map":
        print(await rcon.set_next_map(args.map))
    elif cmd == "change_map":
        print(await rcon.change_map(args.map))
    elif cmd == "kick":
        print(await rcon.kick(args.name, args.reason))
    elif cmd == "ban":
        print(await rcon.ban(args.name, args.duration, args.reason))
    elif cmd == "monitor":
        async for packet in rcon.listen():
            print(f"{packet.id}, {packet.type}, {packet.body}", flush=True)


async def _main(args: argparse.Namespace) -> None:
    config = create_config_from_dict(
        {"host": args.host, "password": args.password, "timeout": args.timeout}
    )
    async with SquadRcon(config) as rcon:
        await run(rcon, args)


def main(argv: Optional[list[str]] = None) -> int:
    """
    程序主入口点。

    Returns:
        int: 进程退出码。
    """
    load_env_file()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.command:
        print("未指定子命令，请使用 --help 查看用法。")
        return 0

    for flag, value in (("--host", args.host), ("--password", args.password)):
        if not value:
            parser.error(f"缺少必要参数 {flag} (或对应的环境变量)")

    try:
        asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info("收到用户中断信号 (Ctrl+C)，退出。")
    except RconError as e:
        print(f"错误: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
