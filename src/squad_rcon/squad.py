# File: src/squad_rcon/squad.py
"""
Squad 领域客户端 (Domain Client)

在 RconClient 之上发出具名管理命令，并将文本响应解析为领域实体；
简单的管理命令则原样返回服务器回复。
"""

import logging
from collections.abc import AsyncIterator

from . import parsers
from .client import RconClient
from .config import RconConfig
from .exceptions import SquadParsingError
from .models import Chat, Player, Squad, Team
from .protocol import constants
from .protocol.packets import RconPacket

logger = logging.getLogger(__name__)


class SquadRcon:
    """Squad 服务器管理客户端 (Async)。

    用法::

        async with SquadRcon(config) as rcon:
            players = await rcon.players()

    每个列表类调用都会重新执行命令并重新解析，不做缓存。
    """

    def __init__(self, config: RconConfig) -> None:
        self.config = config
        self._client = RconClient(config)

    @classmethod
    async def connect(cls, config: RconConfig) -> "SquadRcon":
        """建立连接并完成认证。"""
        rcon = cls(config)
        await rcon._client.connect()
        return rcon

    @property
    def client(self) -> RconClient:
        """底层协议客户端，用于收发原始数据包。"""
        return self._client

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "SquadRcon":
        await self._client.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # 原始命令 / 旁路通道
    # =========================================================================

    async def raw_command(self, command: str) -> str:
        """发送任意命令并返回完整响应文本。"""
        return await self._client.execute(command)

    async def execute_with_chat(self, command: str) -> tuple[str, list[Chat]]:
        """执行命令，并把期间收到的聊天推送一并返回。

        非聊天类型的旁路数据包会被忽略。类型为 CHAT 但正文不是聊天格式的
        推送 (例如 "Admin has possessed admin camera.") 记录 WARNING 后跳过，
        不影响命令响应。

        Returns:
            tuple[str, list[Chat]]: (命令响应文本, 按到达顺序排列的聊天消息)。
        """
        body, others = await self._client.execute_with_side_channel(command)
        chats = []
        for packet in others:
            if packet.type != constants.SERVERDATA_CHAT:
                continue
            try:
                chats.append(parsers.parse_chat(packet.body))
            except SquadParsingError as e:
                logger.warning(f"跳过无法解析的推送 (id={packet.id}): {e}")
        return body, chats

    async def listen(self) -> AsyncIterator[RconPacket]:
        """持续阻塞读取服务器推送的数据包。

        除接收外不做任何其他工作；连接断开时抛出 DisconnectedError，
        不会自动重连。
        """
        while True:
            yield await self._client.recv_packet()

    # =========================================================================
    # 查询
    # =========================================================================

    async def players(self) -> list[Player]:
        """列出在线玩家 (不含最近断开的玩家)。"""
        return parsers.parse_players(await self.raw_command("ListPlayers"))

    async def squads(self) -> tuple[list[Team], list[Squad]]:
        """列出全部队伍与小队。"""
        return parsers.parse_squads(await self.raw_command("ListSquads"))

    async def teams(self) -> list[Team]:
        """列出全部队伍 (即 squads() 结果中的队伍部分)。"""
        teams, _ = await self.squads()
        return teams

    async def list_maps(self) -> list[str]:
        """列出服务器地图轮换中的全部地图。"""
        return parsers.parse_maps(await self.raw_command("ListMaps"))

    async def maps(self) -> tuple[str, str]:
        """返回 (当前地图, 下一张地图)。"""
        return parsers.parse_next_map(await self.raw_command("ShowNextMap"))

    # =========================================================================
    # 管理命令
    #
    # name 参数既可以是玩家昵称，也可以是 SteamID64，协议本身不区分两者。
    # =========================================================================

    async def _admin(self, command: str) -> str:
        reply = await self.raw_command(command)
        logger.info(f"{command.split(' ', 1)[0]}: {reply}")
        return reply

    async def end_match(self) -> str:
        return await self._admin("AdminEndMatch")

    async def change_map(self, map_name: str) -> str:
        """立即结束当前对局并切换地图。"""
        return await self._admin(f"AdminChangeMap {map_name}")

    async def set_next_map(self, map_name: str) -> str:
        return await self._admin(f"AdminSetNextMap {map_name}")

    async def force_team_change(self, name: str) -> str:
        return await self._admin(f"AdminForceTeamChange {name}")

    async def demote_commander(self, name: str) -> str:
        return await self._admin(f"AdminDemoteCommander {name}")

    async def disband_squad(self, team_id: int, squad_id: int) -> str:
        return await self._admin(f"AdminDisbandSquad {team_id} {squad_id}")

    async def broadcast(self, message: str) -> str:
        """向全服广播一条管理员消息。"""
        return await self._admin(f"AdminBroadcast {message}")

    async def chat_to_admin(self, message: str) -> str:
        """向管理员频道发送一条消息。"""
        return await self._admin(f"ChatToAdmin {message}")

    async def warn(self, name: str, reason: str) -> str:
        return await self._admin(f'AdminWarn "{name}" {reason}')

    async def kick(self, name: str, reason: str) -> str:
        return await self._admin(f'AdminKick "{name}" {reason}')

    async def ban(self, name: str, length: str, reason: str) -> str:
        """封禁玩家。

        Args:
            name: 玩家昵称或 SteamID64。
            length: 时长，`1d` 为一天，`1m` 为一个月，`0` 为永久。
            reason: 封禁原因。
        """
        return await self._admin(f'AdminBan "{name}" "{length}" {reason}')
