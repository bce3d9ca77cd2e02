# src/squad_rcon/__init__.py
"""
squad-rcon v0.1.0
基于 Source RCON 协议的 Squad 服务器管理客户端库。
"""

# 暴露核心配置
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露客户端与状态
from .client import RconClient
from .squad import SquadRcon
from .state import ConnectionStatus

# 暴露领域实体
from .models import Chat, Player, Squad, Team
from .protocol import RconPacket

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthenticationError,
    ConfigError,
    DisconnectedError,
    IntegerParseError,
    MalformedPacketError,
    NetworkError,
    ProtocolError,
    RconError,
    SquadParsingError,
    TextDecodingError,
)

__version__ = "0.1.0"

__all__ = [
    "SquadRcon",
    "RconClient",
    "RconConfig",
    "RconPacket",
    "ConnectionStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "Player",
    "Squad",
    "Team",
    "Chat",
    "RconError",
    "ConfigError",
    "NetworkError",
    "DisconnectedError",
    "AuthenticationError",
    "ProtocolError",
    "MalformedPacketError",
    "TextDecodingError",
    "IntegerParseError",
    "SquadParsingError",
]
