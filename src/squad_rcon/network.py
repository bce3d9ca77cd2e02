# src/squad_rcon/network.py
"""
Squad RCON 客户端库 - 网络模块 (Network) [Asyncio Edition]

封装 TCP 流的建立、发送与精确长度读取。
该模块屏蔽了底层 Stream 的复杂性，向协议层提供纯粹的 bytes 收发接口。
"""

import asyncio
import logging
from typing import Optional

from .config import RconConfig
from .exceptions import DisconnectedError, NetworkError

logger = logging.getLogger(__name__)


class NetworkClient:
    """
    封装 asyncio TCP 操作的客户端。

    超时由 config.timeout 控制；为 None 时读写会无限阻塞，
    需要有界延迟的调用方应在配置中给出超时。
    """

    def __init__(self, config: RconConfig):
        self.config = config
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """
        建立到 RCON 服务器的 TCP 连接。
        """
        target = (self.config.host, self.config.port)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(*target), timeout=self.config.timeout
            )
            logger.debug(f"TCP 连接已建立: {self.config.address}")
        except asyncio.TimeoutError:
            raise NetworkError(f"连接超时 {self.config.address}") from None
        except OSError as e:
            raise NetworkError(f"连接失败 {self.config.address}: {e}") from e

    async def send(self, data: bytes) -> None:
        """
        写入全部字节并等待缓冲区排空。
        """
        if not self.is_connected:
            raise NetworkError("连接未建立或已关闭")

        # 显式断言：此时 writer 绝不可能是 None
        assert self.writer is not None

        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=self.config.timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"发送超时 ({self.config.timeout}s)") from None
        except ConnectionError as e:
            raise DisconnectedError(f"发送时连接断开: {e}") from e
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def receive_exactly(self, n: int) -> bytes:
        """
        精确读取 n 个字节。

        分段到达的数据会被累积，直到凑满 n 字节；
        只有对端真正关闭连接时才视为断开。
        """
        if not self.reader:
            raise NetworkError("连接未建立")

        try:
            return await asyncio.wait_for(
                self.reader.readexactly(n), timeout=self.config.timeout
            )
        except asyncio.IncompleteReadError as e:
            raise DisconnectedError(
                f"连接已被对端关闭 (期望 {n} 字节，收到 {len(e.partial)} 字节)"
            ) from e
        except asyncio.TimeoutError:
            raise NetworkError(f"接收超时 ({self.config.timeout}s)") from None
        except ConnectionError as e:
            raise DisconnectedError(f"接收时连接断开: {e}") from e
        except OSError as e:
            raise NetworkError(f"接收错误: {e}") from e

    async def close(self) -> None:
        """关闭 TCP 连接"""
        if self.writer:
            writer, self.writer = self.writer, None
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"关闭连接时出错 (已忽略): {e}")
            logger.debug("TCP 连接已关闭")
        self.reader = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
