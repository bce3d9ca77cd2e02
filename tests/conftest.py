# tests/conftest.py
import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from squad_rcon.client import RconClient
from squad_rcon.config import RconConfig
from squad_rcon.protocol import constants, packets
from squad_rcon.state import ConnectionStatus


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个可直接使用的 RconConfig 对象。
    """
    return RconConfig(
        host="127.0.0.1",
        port=21114,
        password="test_password",
        timeout=None,
    )


def frame(packet_id: int, body: str = "", packet_type: int = constants.SERVERDATA_RESPONSE_VALUE) -> bytes:
    """辅助函数：构造一个服务器发出的帧"""
    return packets.build_packet(packet_id, packet_type, body)


@pytest.fixture
def make_client(valid_config):
    """
    [Fixture] 返回一个工厂：创建连接到“假服务器”的 RconClient。

    读端是真实的 asyncio.StreamReader，预先灌入给定的帧；
    写端是 MagicMock，发出的字节可从 writer.write.call_args_list 取回。
    必须在协程内部调用 (StreamReader 需要运行中的事件循环)。
    """

    def _make(*frames: bytes, config=None, status=ConnectionStatus.READY, eof=False):
        client = RconClient(config or valid_config)

        reader = asyncio.StreamReader()
        for data in frames:
            reader.feed_data(data)
        if eof:
            reader.feed_eof()

        writer = MagicMock()
        writer.is_closing.return_value = False
        writer.drain = AsyncMock()
        writer.wait_closed = AsyncMock()

        client.net_client.reader = reader
        client.net_client.writer = writer
        client._state.status = status
        return client, reader, writer

    return _make


def sent_packets(writer) -> list:
    """辅助函数：解析假写端收到的所有数据包"""
    return [packets.decode_packet(c.args[0]) for c in writer.write.call_args_list]
