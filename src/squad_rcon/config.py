"""
Squad RCON 客户端库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .protocol import constants

logger = logging.getLogger(__name__)

DEFAULT_RCON_PORT = 21114


@dataclass(frozen=True)
class RconConfig:
    """RCON 连接的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: RCON 服务器地址 (IP 或域名)。
        port: RCON 端口 (Squad 默认 21114)。
        password: RCON 密码。
        timeout: 连接与单次读写的超时秒数。None 表示无限阻塞。
        max_packet_id: 包 id 计数器的上限，超过后回绕到起始值。
    """

    host: str
    port: int
    password: str
    timeout: float | None = None
    max_packet_id: int = constants.PACKET_ID_MAX

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def __repr__(self) -> str:
        """隐藏密码字段，防止日志泄露敏感信息。"""
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"password='******', "
            f"timeout={self.timeout}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。
    host 支持 `ADDR:PORT` 写法，此时若未单独给出 port 则使用其中的端口。

    Args:
        raw_data: 原始配置字典 (来自 TOML、Env 或 CLI)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> Any:
            """获取必要字段，缺失则报错"""
            if raw_data.get(key) in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _to_int(key: str, val: Any) -> int:
            try:
                return int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"整数格式无效 '{key}': {val}")

        def _split_host(val: str) -> tuple[str, int | None]:
            """拆分 ADDR:PORT，IPv6 需写成 [addr]:port"""
            if val.startswith("["):
                addr, _, rest = val[1:].partition("]")
                port = rest.lstrip(":")
                return addr, _to_int("host", port) if port else None
            if val.count(":") == 1:
                addr, port = val.split(":")
                return addr, _to_int("host", port)
            return val, None

        host, host_port = _split_host(str(_req("host")).strip())
        if not host:
            raise ConfigError("配置缺失: host 为空")

        if raw_data.get("port") not in (None, ""):
            port = _to_int("port", raw_data["port"])
        elif host_port is not None:
            port = host_port
        else:
            port = DEFAULT_RCON_PORT

        if not 0 < port < 65536:
            raise ConfigError(f"端口超出范围: {port}")

        timeout = raw_data.get("timeout")
        if timeout in (None, ""):
            timeout = None
        else:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效: {timeout}")
            if timeout <= 0:
                raise ConfigError(f"超时必须为正数: {timeout}")

        max_packet_id = _to_int(
            "max_packet_id", raw_data.get("max_packet_id", constants.PACKET_ID_MAX)
        )
        if not constants.PACKET_ID_START < max_packet_id <= constants.PACKET_ID_MAX:
            raise ConfigError(f"max_packet_id 超出范围: {max_packet_id}")

        # --- 构建对象 ---
        return RconConfig(
            host=host,
            port=port,
            password=str(_req("password")),
            timeout=timeout,
            max_packet_id=max_packet_id,
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env() -> RconConfig:
    """从环境变量加载配置。

    读取 `SQUAD_RCON_` 前缀的环境变量，例如 `SQUAD_RCON_HOST` -> `host`。

    Returns:
        RconConfig: 配置对象。

    Raises:
        ConfigError: 未检测到任何相关环境变量，或必要字段缺失。
    """
    env_map = {
        "host": "HOST",
        "port": "PORT",
        "password": "PASS",
        "timeout": "TIMEOUT",
        "max_packet_id": "MAX_PACKET_ID",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"SQUAD_RCON_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 SQUAD_RCON_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
