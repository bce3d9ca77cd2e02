# tests/test_state.py
"""
测试连接状态机的流转与会话状态默认值。
"""

from unittest.mock import AsyncMock

import pytest

from conftest import frame
from squad_rcon.client import RconClient
from squad_rcon.protocol import constants
from squad_rcon.state import ConnectionStatus, SessionState


def test_session_defaults():
    state = SessionState()
    assert state.next_id == constants.PACKET_ID_START
    assert state.status is ConnectionStatus.DISCONNECTED
    assert state.is_ready is False


@pytest.mark.asyncio
async def test_status_transitions(valid_config, monkeypatch, make_client):
    """DISCONNECTED -> CONNECTING -> AUTHENTICATING -> READY -> CLOSED"""
    _, reader, writer = make_client(
        frame(1, "", constants.SERVERDATA_RESPONSE_VALUE),
        frame(1, "", constants.SERVERDATA_AUTH_RESPONSE),
    )
    monkeypatch.setattr(
        "squad_rcon.network.asyncio.open_connection",
        AsyncMock(return_value=(reader, writer)),
    )

    seen = []
    client = RconClient(valid_config)
    original = client._update_status

    def record(status, msg):
        seen.append(status)
        original(status, msg)

    client._update_status = record

    async with client:
        assert client._state.is_ready

    assert seen == [
        ConnectionStatus.CONNECTING,
        ConnectionStatus.AUTHENTICATING,
        ConnectionStatus.READY,
        ConnectionStatus.CLOSED,
    ]
