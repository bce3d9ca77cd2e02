# src/squad_rcon/protocol/constants.py
"""
Source RCON 协议层 - 常量定义

本模块定义了所有协议相关的魔法数字、帧结构尺寸和固定命令。
线上格式 (全部为小端序有符号 32 位整数):

    [int32 size][int32 id][int32 type][size-10 字节 body][0x00][0x00]
"""

# =========================================================================
# 1. 包类型 (Packet Types)
# =========================================================================

SERVERDATA_AUTH = 3
SERVERDATA_AUTH_RESPONSE = 2
SERVERDATA_EXECCOMMAND = 2
SERVERDATA_RESPONSE_VALUE = 0

# Squad 服务器在同一连接上主动推送的聊天/广播包
SERVERDATA_CHAT = 1

# 认证失败时服务器在 AUTH_RESPONSE 中返回的 id
AUTH_FAILED_ID = -1

# =========================================================================
# 2. 帧结构 (Frame Layout)
# =========================================================================

# struct 格式: size + id + type
HEADER_FORMAT = "<iii"
HEADER_SIZE = 12
SIZE_FIELD_LEN = 4

# id(4) + type(4) + 终止符(2)，size 字段中除 body 之外的固定部分
PACKET_OVERHEAD = 10
TERMINATOR = b"\x00\x00"

# Source RCON 约定的单帧上限 (含 size 字段之后的全部内容)。
# 仅用于告警，编码时不会截断。
MAX_PACKET_SIZE = 4096
MAX_BODY_SIZE = MAX_PACKET_SIZE - PACKET_OVERHEAD

# =========================================================================
# 3. 会话参数 (Session)
# =========================================================================

# 包 id 的起始值与默认上限。回绕到起始值而不是 0，避开 0 与 -1 哨兵值。
PACKET_ID_START = 1
PACKET_ID_MAX = 2**31 - 1

# 分片重组使用的检查点命令：无副作用，且必定有响应
CHECKPOINT_COMMAND = "ListCommands"
