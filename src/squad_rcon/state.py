# File: src/squad_rcon/state.py
"""
Squad RCON 客户端库 - 状态模块

负责定义和存储连接会话的易变状态。
本模块不包含业务逻辑，仅作为数据容器供 RconClient 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto

from .protocol import constants


class ConnectionStatus(Enum):
    """RCON 连接的生命周期状态枚举。

    状态流转示意:
    DISCONNECTED -> CONNECTING -> AUTHENTICATING -> READY -> CLOSED
                        |               |
                        v               v
                      CLOSED          CLOSED
    """

    DISCONNECTED = auto()
    """初始状态，客户端已实例化但尚未建立连接。"""

    CONNECTING = auto()
    """正在建立 TCP 连接。"""

    AUTHENTICATING = auto()
    """TCP 已建立，正在发送密码并等待 AUTH_RESPONSE。"""

    READY = auto()
    """认证成功，可以执行命令。"""

    CLOSED = auto()
    """连接已关闭 (主动关闭、认证失败或 I/O 错误)。终态。"""


@dataclass
class SessionState:
    """存储一次 RCON 会话的易变状态数据。

    每个连接独占一个实例，连接关闭后即废弃，不可复用于新连接。

    Attributes:
        next_id: 下一个待分配的包 id。
        status: 当前连接状态。
    """

    next_id: int = constants.PACKET_ID_START
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED

    @property
    def is_ready(self) -> bool:
        return self.status is ConnectionStatus.READY
