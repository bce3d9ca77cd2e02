# File: src/squad_rcon/parsers.py
"""
Squad 命令响应解析器 (Parsers)

负责将纯文本命令输出转换为领域实体。
本模块是无状态的；所有正则在导入时编译一次，之后只读共享。

通用策略：按行切分，丢弃第 0 行的标题横幅，其余每行套用固定格式。
空白行会被跳过。批量解析中只要有一行无法识别，整个调用即失败。
"""

import logging
import re

from .exceptions import IntegerParseError, SquadParsingError
from .models import Chat, Player, Squad, Team

logger = logging.getLogger(__name__)

# --- 行格式 ---
PLAYER_PATTERN = re.compile(
    r"ID: (\d*) \| SteamID: (\d*) \| Name: (.*) \| Team ID: (\d*) \| Squad ID: (.*)"
)
SQUAD_PATTERN = re.compile(
    r"ID: (\d*) \| Name: (.*) \| Size: (\d*) \| Locked: (\w*)"
)
TEAM_PATTERN = re.compile(r"Team ID: (\d*) \((.*)\)")
NEXT_MAP_PATTERN = re.compile(r"Current map is (.*), Next map is (.*)")
CHAT_PATTERN = re.compile(
    r"\[(\w+)\] \[SteamID:(\d+)\] (.+?) : (.*)", re.DOTALL
)

DISCONNECTED_MARKER = "Recently Disconnected Players"


def _int_or(value: str, default: int) -> int:
    """解析整数，失败时返回默认值。"""
    try:
        return int(value)
    except ValueError:
        return default


def _int_or_none(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def _int_strict(field: str, value: str) -> int:
    """解析整数，失败时抛出 IntegerParseError。"""
    try:
        return int(value)
    except ValueError as e:
        raise IntegerParseError(field, value) from e


def _body_lines(text: str) -> list[str]:
    """按换行切分并丢弃第 0 行标题。"""
    lines = text.split("\n")
    return lines[1:]


def parse_players(text: str) -> list[Player]:
    """解析 ListPlayers 的输出。

    遇到 “Recently Disconnected Players” 标记即停止，其后的行不是在线玩家。

    Args:
        text: 命令完整响应文本。

    Returns:
        list[Player]: 按原始顺序排列的在线玩家。

    Raises:
        SquadParsingError: 任意一行无法匹配玩家格式。
        IntegerParseError: 玩家 ID 或 SteamID 不是合法整数。
    """
    players = []

    for line in _body_lines(text):
        if DISCONNECTED_MARKER in line:
            break
        if not line.strip():
            continue

        match = PLAYER_PATTERN.search(line)
        if match is None:
            raise SquadParsingError(f"无法解析玩家行: {line!r}", line)

        player_id, steam_id, name, team_id, squad_id = match.groups()

        _int_strict("steam_id", steam_id)

        players.append(
            Player(
                id=_int_strict("id", player_id),
                steam_id=steam_id,
                name=name,
                team_id=_int_or(team_id, 0),
                squad_id=_int_or_none(squad_id.strip()),
            )
        )

    return players


def parse_squads(text: str) -> tuple[list[Team], list[Squad]]:
    """解析 ListSquads 的输出。

    队伍标题行与小队行交错出现；每个小队归属于它之前最近的一个队伍标题。

    Returns:
        tuple[list[Team], list[Squad]]: 出现过的全部队伍与小队，均保持原始顺序。

    Raises:
        SquadParsingError: 任意一行既不是队伍标题也不是小队。
    """
    teams = []
    squads = []
    current_team = 0

    for line in _body_lines(text):
        if not line.strip():
            continue

        team_match = TEAM_PATTERN.search(line)
        if team_match:
            team_id, name = team_match.groups()
            current_team = _int_or(team_id, 0)
            teams.append(Team(id=current_team, name=name))
            continue

        squad_match = SQUAD_PATTERN.search(line)
        if squad_match:
            squad_id, name, size, locked = squad_match.groups()
            squads.append(
                Squad(
                    id=_int_or(squad_id, 0),
                    name=name,
                    size=_int_or(size, 0),
                    team_id=current_team,
                    locked=locked == "True",
                )
            )
            continue

        raise SquadParsingError(f"无法解析小队行: {line!r}", line)

    return teams, squads


def parse_maps(text: str) -> list[str]:
    """解析 ListMaps 的输出：每行一个地图名，原样返回。"""
    return text.split("\n")


def parse_next_map(text: str) -> tuple[str, str]:
    """解析 ShowNextMap 的输出。

    Returns:
        tuple[str, str]: (当前地图, 下一张地图)。

    Raises:
        SquadParsingError: 响应不符合 “Current map is X, Next map is Y”。
    """
    match = NEXT_MAP_PATTERN.search(text.strip())
    if match is None:
        raise SquadParsingError(f"无法解析地图信息: {text!r}", text)
    current_map, next_map = match.groups()
    return current_map, next_map


def parse_chat(body: str) -> Chat:
    """解析一条聊天推送。

    格式: `[ChatAll] [SteamID:76561198000000000] Name : message`

    Raises:
        SquadParsingError: 包体不符合聊天格式。
    """
    match = CHAT_PATTERN.match(body.strip())
    if match is None:
        raise SquadParsingError(f"无法解析聊天消息: {body!r}", body)
    channel, steam_id, name, message = match.groups()
    return Chat(channel=channel, steam_id=steam_id, name=name, message=message)
