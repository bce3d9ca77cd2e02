# File: src/squad_rcon/client.py
"""
Source RCON 协议客户端 (Protocol Client)

职责：
1. 资源组装：State + Network + Config。
2. 生命周期：Connect -> Authenticate -> Execute -> Close。
3. 分片重组：通过检查点命令确定一个响应的所有分片均已到达。

关于分片重组：
Squad 服务器的一个逻辑响应可能被拆成多个同 id 的包，且没有“后续还有数据”
的标志位。因此每条命令之后会紧跟发送一条无害的检查点命令 (ListCommands)。
服务器在同一连接上按发送顺序处理并应答命令，所以当检查点命令的响应到达时，
真实命令的所有分片一定已经全部送达。
该顺序保证来自服务器，客户端无法自行验证。
"""

import logging

from .config import RconConfig
from .exceptions import AuthenticationError, NetworkError, ProtocolError, RconError
from .network import NetworkClient
from .protocol import constants, packets
from .protocol.packets import RconPacket
from .state import ConnectionStatus, SessionState

logger = logging.getLogger(__name__)


class RconClient:
    """Source RCON 协议客户端 (Async)。

    同一时刻只允许一个命令在途；调用方必须 await 完一个操作后再发起下一个。
    本类不做任何加锁，也不支持跨协程共享。
    """

    def __init__(self, config: RconConfig) -> None:
        """初始化客户端，但不建立连接。

        Args:
            config: 连接配置。
        """
        self.config = config
        self._state = SessionState()
        self.net_client = NetworkClient(config)

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    # =========================================================================
    # 生命周期
    # =========================================================================

    async def connect(self) -> "RconClient":
        """建立连接并立即完成认证。

        任何一步失败都会关闭连接并重新抛出异常，
        不存在“已连接但未认证”的可观察状态。

        Returns:
            RconClient: 处于 READY 状态的自身。

        Raises:
            NetworkError: 连接或读写失败。
            AuthenticationError: 密码错误。
            ProtocolError: 认证阶段收到非预期的数据包。
        """
        if self._state.status is not ConnectionStatus.DISCONNECTED:
            raise RconError(f"客户端状态为 {self._state.status.name}，不能重复连接")

        self._update_status(ConnectionStatus.CONNECTING, f"正在连接 {self.config.address}")
        try:
            await self.net_client.connect()
            await self.authenticate()
        except RconError as e:
            logger.error(f"连接失败: {e}")
            await self.close()
            raise

        self._update_status(ConnectionStatus.READY, "认证成功")
        return self

    async def authenticate(self) -> None:
        """执行 RCON 认证握手。

        流程: 发送 AUTH(password) -> 读取 RESPONSE_VALUE -> 读取 AUTH_RESPONSE。
        两次读取与协议文档描述的认证序列一一对应，不可合并为一次。

        Raises:
            ProtocolError: 两个响应包中任意一个类型不符。
            AuthenticationError: AUTH_RESPONSE 的 id 为 -1。
        """
        self._update_status(ConnectionStatus.AUTHENTICATING, "正在认证...")

        auth_packet = RconPacket(
            self.next_id(), constants.SERVERDATA_AUTH, self.config.password
        )
        await self.send_packet(auth_packet)

        response = await self.recv_packet()
        if response.type != constants.SERVERDATA_RESPONSE_VALUE:
            raise ProtocolError(
                f"认证阶段期望 RESPONSE_VALUE，收到 type={response.type}"
            )

        response = await self.recv_packet()
        if response.type != constants.SERVERDATA_AUTH_RESPONSE:
            raise ProtocolError(
                f"认证阶段期望 AUTH_RESPONSE，收到 type={response.type}"
            )

        if response.id == constants.AUTH_FAILED_ID:
            raise AuthenticationError("认证被拒绝: RCON 密码错误")

    async def close(self) -> None:
        """关闭连接。关闭后客户端不可再次使用。"""
        await self.net_client.close()
        if self._state.status is not ConnectionStatus.CLOSED:
            self._update_status(ConnectionStatus.CLOSED, "连接已关闭")

    async def __aenter__(self) -> "RconClient":
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # 原语
    # =========================================================================

    def next_id(self) -> int:
        """分配一个新的包 id。

        单调递增，超过 config.max_packet_id 后回绕到 PACKET_ID_START，
        永远不会分配 0 或认证失败哨兵 -1。
        """
        packet_id = self._state.next_id
        if packet_id >= self.config.max_packet_id:
            self._state.next_id = constants.PACKET_ID_START
        else:
            self._state.next_id = packet_id + 1
        return packet_id

    async def send_packet(self, packet: RconPacket) -> None:
        """编码并发送一个数据包。发送失败会关闭连接。"""
        try:
            await self.net_client.send(packets.encode_packet(packet))
        except RconError as e:
            await self._abort(e)
            raise

    async def recv_packet(self) -> RconPacket:
        """阻塞读取下一个数据包。

        读取或解析失败时流中可能残留半个帧，因此任何错误都会关闭连接。
        """
        try:
            return await packets.read_packet(self.net_client)
        except RconError as e:
            await self._abort(e)
            raise

    # =========================================================================
    # 命令执行
    # =========================================================================

    async def execute(self, command: str) -> str:
        """执行一条命令并返回完整的响应文本。

        既不属于本命令也不是检查点的包会被丢弃。

        Args:
            command: 命令文本。

        Returns:
            str: 所有分片按到达顺序直接拼接 (无分隔符) 的结果。
        """
        body, _ = await self._exec(command, collect_others=False)
        return body

    async def execute_with_side_channel(
        self, command: str
    ) -> tuple[str, list[RconPacket]]:
        """执行一条命令，同时收集期间到达的其他数据包 (如聊天推送)。

        Returns:
            tuple[str, list[RconPacket]]: (完整响应文本, 按到达顺序排列的其他包)。
        """
        return await self._exec(command, collect_others=True)

    async def _exec(
        self, command: str, collect_others: bool
    ) -> tuple[str, list[RconPacket]]:
        """[Internal] 发送命令 + 检查点命令，读取直到检查点响应出现。"""
        if not self._state.is_ready:
            raise NetworkError(f"连接未就绪 (状态: {self._state.status.name})")

        request_id = self.next_id()
        checkpoint_id = self.next_id()

        await self.send_packet(
            RconPacket(request_id, constants.SERVERDATA_EXECCOMMAND, command)
        )
        await self.send_packet(
            RconPacket(
                checkpoint_id,
                constants.SERVERDATA_EXECCOMMAND,
                constants.CHECKPOINT_COMMAND,
            )
        )

        body_parts: list[str] = []
        others: list[RconPacket] = []

        while True:
            response = await self.recv_packet()

            if response.id == request_id:
                body_parts.append(response.body)
            elif response.id == checkpoint_id:
                break
            elif collect_others:
                others.append(response)
            else:
                logger.debug(
                    f"丢弃无关数据包: id={response.id} type={response.type}"
                )

        if len(body_parts) > 1:
            logger.debug(f"命令 {command!r} 的响应由 {len(body_parts)} 个分片组成")

        return "".join(body_parts), others

    # =========================================================================
    # 内部工具
    # =========================================================================

    async def _abort(self, error: RconError) -> None:
        """[Internal] I/O 或协议错误对连接是致命的：记录并关闭。"""
        if self._state.status is not ConnectionStatus.CLOSED:
            logger.error(f"连接出错，关闭连接: {error}")
            await self.close()

    def _update_status(self, status: ConnectionStatus, msg: str) -> None:
        """更新内部状态并记录日志。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")
