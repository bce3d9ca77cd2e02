# File: src/squad_rcon/exceptions.py
"""
Squad RCON 客户端库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI）能进行精细的错误处理。
所有底层异常 (OSError / UnicodeDecodeError / ValueError) 均通过
`raise ... from e` 包装为本模块的类型，核心库内部不做任何重试或吞没。
"""


class RconError(Exception):
    """squad-rcon 所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 squad_rcon 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host/password)。
    2. 字段格式错误 (如端口不是整数、超时为负数)。
    3. 找不到配置文件或环境变量。
    """

    pass


class NetworkError(RconError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. TCP 连接建立失败 (拒绝连接、DNS 解析失败)。
    2. 发送或接收时 Socket 报错。
    3. 配置了超时且读写超时。

    注意: 连接上的任何 I/O 错误都是致命的，本库不会自动重连。
    """

    pass


class DisconnectedError(NetworkError):
    """对端关闭连接。

    读取一个数据包的过程中遇到 EOF (包括读到一半的情况) 时抛出。
    """

    pass


class AuthenticationError(RconError):
    """认证被拒绝。

    服务器在 AUTH_RESPONSE 包中返回 id == -1，通常意味着 RCON 密码错误。
    """

    pass


class ProtocolError(RconError):
    """协议交互错误 (逻辑级别)。

    触发场景:
    1. 认证阶段收到非预期类型的数据包。
    2. 数据包结构损坏 (见 MalformedPacketError)。
    3. 包体不是合法的 UTF-8 (见 TextDecodingError)。
    """

    pass


class MalformedPacketError(ProtocolError):
    """数据包长度字段非法 (size < 10) 或缓冲区不足一个完整帧。"""

    pass


class TextDecodingError(ProtocolError):
    """包体字节无法按 UTF-8 解码。"""

    pass


class SquadParsingError(RconError):
    """命令的文本响应中存在无法识别的行。

    批量解析 (ListPlayers / ListSquads) 中只要有一行不匹配，
    整个调用即失败，不返回部分结果。
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        """初始化解析错误。

        Args:
            message: 错误描述信息。
            line: 导致失败的原始文本行 (可选)。
        """
        super().__init__(message)
        self.line = line


class IntegerParseError(RconError):
    """必须为整数且没有默认值的字段 (玩家 ID / SteamID) 无法解析。"""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"字段 '{field}' 不是合法整数: {value!r}")
        self.field = field
        self.value = value
