# File: src/squad_rcon/protocol/packets.py
"""
Source RCON 协议封包构建器与解析器 (Packet Codec)

负责 RconPacket 与二进制帧之间的相互转换。
除 read_packet 需要一个可读的网络客户端外，本模块是无状态的，
不持有任何配置或会话信息。
"""

import logging
import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import MalformedPacketError, TextDecodingError
from . import constants

if TYPE_CHECKING:
    from ..network import NetworkClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RconPacket:
    """一个逻辑 RCON 数据包。

    Attributes:
        id: 请求/响应 id (有符号 32 位)。
        type: 包类型，见 constants.SERVERDATA_*。
        body: 包体文本，不含末尾的两个 0x00。
    """

    id: int
    type: int
    body: str = ""


# =========================================================================
# Encode
# =========================================================================


def build_packet(packet_id: int, packet_type: int, body: str) -> bytes:
    """构建一个完整的 RCON 帧。

    结构: Size(4B) + Id(4B) + Type(4B) + Body(UTF-8) + 0x00 0x00
    其中 Size = len(Body 字节) + 10。

    Args:
        packet_id: 包 id。
        packet_type: 包类型。
        body: 包体文本。

    Returns:
        bytes: 可直接写入 TCP 流的字节。
    """
    body_bytes = body.encode("utf-8")
    if len(body_bytes) > constants.MAX_BODY_SIZE:
        logger.warning(
            "包体长度 %d 超过协议建议上限 %d，仍按原样发送",
            len(body_bytes),
            constants.MAX_BODY_SIZE,
        )

    size = len(body_bytes) + constants.PACKET_OVERHEAD
    header = struct.pack(constants.HEADER_FORMAT, size, packet_id, packet_type)
    return header + body_bytes + constants.TERMINATOR


def encode_packet(packet: RconPacket) -> bytes:
    """将 RconPacket 编码为二进制帧。"""
    return build_packet(packet.id, packet.type, packet.body)


# =========================================================================
# Decode
# =========================================================================


def parse_header(data: bytes) -> tuple[int, int, int]:
    """解析 12 字节帧头。

    Args:
        data: 恰好 12 字节的 size + id + type。

    Returns:
        tuple[int, int, int]: (size, id, type)。

    Raises:
        MalformedPacketError: 帧头长度不足，或 size < 10 (body 长度会下溢)。
    """
    if len(data) < constants.HEADER_SIZE:
        raise MalformedPacketError(f"帧头长度不足: {len(data)} 字节")

    size, packet_id, packet_type = struct.unpack(
        constants.HEADER_FORMAT, data[: constants.HEADER_SIZE]
    )
    if size < constants.PACKET_OVERHEAD:
        raise MalformedPacketError(f"非法的包长度字段: {size}")
    return size, packet_id, packet_type


def decode_body(raw: bytes) -> str:
    """将包体字节按 UTF-8 解码。

    Raises:
        TextDecodingError: 包体不是合法的 UTF-8。
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextDecodingError(f"包体不是合法的 UTF-8: {e}") from e


def decode_packet(data: bytes) -> RconPacket:
    """从内存缓冲区解析一个完整的帧。

    末尾两个终止字节只要求存在，不校验其内容。

    Args:
        data: 以 size 字段开头的字节流，至少包含一个完整帧。

    Returns:
        RconPacket: 解析得到的数据包。

    Raises:
        MalformedPacketError: 长度字段非法或缓冲区不足一个完整帧。
        TextDecodingError: 包体解码失败。
    """
    size, packet_id, packet_type = parse_header(data)

    frame_end = constants.SIZE_FIELD_LEN + size
    if len(data) < frame_end:
        raise MalformedPacketError(
            f"数据不完整: 需要 {frame_end} 字节，实际 {len(data)} 字节"
        )

    body_end = frame_end - len(constants.TERMINATOR)
    body = decode_body(data[constants.HEADER_SIZE : body_end])
    return RconPacket(packet_id, packet_type, body)


async def read_packet(net_client: "NetworkClient") -> RconPacket:
    """从网络客户端读取并解析恰好一个数据包。

    按帧头 -> 包体 -> 终止符的顺序精确读取所需字节数，
    分段到达的数据由 net_client.receive_exactly 负责累积。

    Args:
        net_client: 已连接的网络客户端。

    Returns:
        RconPacket: 解析得到的数据包。

    Raises:
        DisconnectedError: 读取过程中对端关闭连接。
        MalformedPacketError: size < 10。
        TextDecodingError: 包体解码失败。
    """
    header = await net_client.receive_exactly(constants.HEADER_SIZE)
    size, packet_id, packet_type = parse_header(header)

    body_len = size - constants.PACKET_OVERHEAD
    raw_body = await net_client.receive_exactly(body_len) if body_len else b""

    # 终止符只读取丢弃，不做校验
    await net_client.receive_exactly(len(constants.TERMINATOR))

    body = decode_body(raw_body)
    logger.debug("recv packet: id=%d type=%d len=%d", packet_id, packet_type, body_len)
    return RconPacket(packet_id, packet_type, body)
