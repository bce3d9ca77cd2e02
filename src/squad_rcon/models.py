"""
Squad 领域实体 (Entities)

每次查询都会重新解析服务器输出并生成全新的实体，本库不做任何缓存。
所有实体在构造后不可变 (frozen=True)。
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Player:
    """ListPlayers 输出中的一名在线玩家。

    Attributes:
        id: 服务器内的玩家序号。
        steam_id: SteamID64 (十进制文本)。
        name: 玩家昵称。
        team_id: 所在队伍 id。
        squad_id: 所在小队 id，不在小队中时为 None。
    """

    id: int
    steam_id: str
    name: str
    team_id: int
    squad_id: int | None = None

    @property
    def in_squad(self) -> bool:
        return self.squad_id is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Team:
    """ListSquads 输出中的一个队伍标题。"""

    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Squad:
    """ListSquads 输出中的一个小队。

    team_id 取自源文本中位于该行之前、最近的一行队伍标题。
    """

    id: int
    name: str
    size: int
    team_id: int
    locked: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Chat:
    """服务器主动推送的一条聊天消息 (SERVERDATA_CHAT 包)。

    Attributes:
        channel: 频道，例如 ChatAll / ChatTeam / ChatSquad / ChatAdmin。
        steam_id: 发送者 SteamID64。
        name: 发送者昵称。
        message: 消息正文。
    """

    channel: str
    steam_id: str
    name: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
