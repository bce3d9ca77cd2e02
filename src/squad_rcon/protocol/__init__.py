# src/squad_rcon/protocol/__init__.py
"""
Source RCON 协议层 (Protocol Layer)

本包负责协议数据包的纯粹构建 (Build) 与解析 (Parse)。

- 不包含 socket 的创建与管理。
- 不包含任何状态管理 (State)。
- 不依赖于 client 层。
"""

from . import constants
from .packets import (
    RconPacket,
    build_packet,
    decode_body,
    decode_packet,
    encode_packet,
    parse_header,
    read_packet,
)

# 公共 API
__all__ = [
    "constants",
    "RconPacket",
    "build_packet",
    "encode_packet",
    "parse_header",
    "decode_body",
    "decode_packet",
    "read_packet",
]
