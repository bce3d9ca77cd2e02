# tests/test_main.py
"""
测试命令行入口的参数解析、子命令分发与退出码。
"""

import pytest

from squad_rcon import main as cli
from squad_rcon.exceptions import AuthenticationError
from squad_rcon.models import Player, Squad, Team
from squad_rcon.protocol.packets import RconPacket


class FakeRcon:
    """替代 SquadRcon 的假客户端，记录调用并返回固定数据"""

    instances: list["FakeRcon"] = []
    fail_with: Exception | None = None

    def __init__(self, config):
        self.config = config
        self.calls = []
        FakeRcon.instances.append(self)

    async def __aenter__(self):
        if FakeRcon.fail_with:
            raise FakeRcon.fail_with
        return self

    async def __aexit__(self, *exc):
        return None

    async def players(self):
        return [
            Player(1, "1111", "Alice", 1, 2),
            Player(2, "2222", "Bob", 2, None),
        ]

    async def teams(self):
        return [Team(1, "Team Alpha")]

    async def squads(self):
        return [Team(1, "Team Alpha")], [Squad(1, "Alpha Squad", 5, 1, True)]

    async def maps(self):
        return "Narva_RAAS_v1", "Mutaha_AAS_v1"

    async def ban(self, name, duration, reason):
        self.calls.append(("ban", name, duration, reason))
        return "Banned"

    async def raw_command(self, command):
        self.calls.append(("raw", command))
        return "raw reply"

    async def listen(self):
        yield RconPacket(5, 1, "[ChatAll] [SteamID:1] a : b")


@pytest.fixture(autouse=True)
def fake_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    # 先 setenv 再 delenv，确保 load_dotenv 写入的变量在用例结束后被清理
    for name in ("SQUAD_RCON_HOST", "SQUAD_RCON_PASS", "SQUAD_RCON_TIMEOUT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setattr(cli, "SquadRcon", FakeRcon)
    FakeRcon.instances = []
    FakeRcon.fail_with = None


BASE = ["-h", "127.0.0.1:21114", "-p", "pw"]


def test_players_output(capsys):
    assert cli.main(BASE + ["players"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["Alice - 1111 - 1 - 2", "Bob - 2222 - 2 - N/A"]
    assert FakeRcon.instances[0].config.port == 21114


def test_teams_squads_maps_output(capsys):
    cli.main(BASE + ["teams"])
    cli.main(BASE + ["squads"])
    cli.main(BASE + ["maps"])

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "1: Team Alpha",
        "1: Alpha Squad (5 players)",
        "Current map: Narva_RAAS_v1",
        "Next map: Mutaha_AAS_v1",
    ]


def test_ban_arguments(capsys):
    assert cli.main(BASE + ["ban", "Bob Smith", "1m", "cheating"]) == 0
    assert FakeRcon.instances[0].calls == [("ban", "Bob Smith", "1m", "cheating")]
    assert capsys.readouterr().out.strip() == "Banned"


def test_monitor_prints_packets(capsys):
    assert cli.main(BASE + ["monitor"]) == 0
    assert capsys.readouterr().out.strip() == "5, 1, [ChatAll] [SteamID:1] a : b"


def test_credentials_from_env_file(tmp_path, capsys):
    (tmp_path / ".env").write_text(
        "SQUAD_RCON_HOST=10.0.0.5:21115\nSQUAD_RCON_PASS=fromfile\n", encoding="utf-8"
    )

    assert cli.main(["raw", "ListCommands"]) == 0
    config = FakeRcon.instances[0].config
    assert (config.host, config.port, config.password) == ("10.0.0.5", 21115, "fromfile")


def test_missing_password_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["-h", "127.0.0.1", "players"])
    assert exc.value.code == 2


def test_core_error_exits_nonzero(capsys):
    FakeRcon.fail_with = AuthenticationError("认证被拒绝: RCON 密码错误")

    assert cli.main(BASE + ["players"]) == 1
    assert "认证被拒绝" in capsys.readouterr().err


def test_no_subcommand(capsys):
    assert cli.main(BASE) == 0
    assert "--help" in capsys.readouterr().out


def test_empty_timeout_env_means_no_timeout(monkeypatch):
    monkeypatch.setenv("SQUAD_RCON_TIMEOUT", "")

    assert cli.main(BASE + ["players"]) == 0
    assert FakeRcon.instances[0].config.timeout is None
