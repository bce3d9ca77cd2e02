# tests/test_config.py
import pytest

from squad_rcon import ConfigError
from squad_rcon.config import (
    DEFAULT_RCON_PORT,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from squad_rcon.protocol import constants

# --- Factory 测试 (核心逻辑) ---


def test_create_minimal():
    config = create_config_from_dict({"host": "10.0.0.1", "password": "pw"})

    assert config.host == "10.0.0.1"
    assert config.port == DEFAULT_RCON_PORT
    assert config.timeout is None
    assert config.max_packet_id == constants.PACKET_ID_MAX


def test_host_with_port():
    config = create_config_from_dict({"host": "10.0.0.1:27165", "password": "pw"})
    assert (config.host, config.port) == ("10.0.0.1", 27165)
    assert config.address == "10.0.0.1:27165"


def test_explicit_port_wins():
    config = create_config_from_dict(
        {"host": "10.0.0.1:27165", "port": "21115", "password": "pw"}
    )
    assert config.port == 21115


def test_ipv6_host():
    config = create_config_from_dict({"host": "[::1]:21114", "password": "pw"})
    assert (config.host, config.port) == ("::1", 21114)


def test_timeout_parsed():
    config = create_config_from_dict({"host": "h", "password": "pw", "timeout": "2.5"})
    assert config.timeout == 2.5


@pytest.mark.parametrize(
    "raw, match",
    [
        ({"password": "pw"}, "配置缺失"),
        ({"host": "h"}, "配置缺失"),
        ({"host": "h", "password": ""}, "配置缺失"),
        ({"host": "h:abc", "password": "pw"}, "整数格式无效"),
        ({"host": "h", "port": 70000, "password": "pw"}, "端口超出范围"),
        ({"host": "h", "password": "pw", "timeout": "-1"}, "超时必须为正数"),
        ({"host": "h", "password": "pw", "timeout": "soon"}, "超时格式无效"),
        ({"host": "h", "password": "pw", "max_packet_id": 1}, "max_packet_id"),
    ],
)
def test_invalid_config(raw, match):
    with pytest.raises(ConfigError, match=match):
        create_config_from_dict(raw)


def test_repr_hides_password():
    config = create_config_from_dict({"host": "h", "password": "s3cret"})
    assert "s3cret" not in repr(config)
    assert "******" in repr(config)


# --- 加载器测试 ---


def test_load_from_toml_profile(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[profile.default]\nhost = "1.1.1.1"\npassword = "a"\n'
        '[profile.event]\nhost = "2.2.2.2:30000"\npassword = "b"\ntimeout = 5\n',
        encoding="utf-8",
    )

    assert load_config_from_toml(path).host == "1.1.1.1"

    event = load_config_from_toml(path, profile="event")
    assert (event.host, event.port, event.timeout) == ("2.2.2.2", 30000, 5.0)


def test_load_from_toml_rcon_section(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[rcon]\nhost = "3.3.3.3"\npassword = "c"\n', encoding="utf-8")
    assert load_config_from_toml(path).host == "3.3.3.3"


def test_load_from_toml_missing_profile(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[profile.default]\nhost = "h"\npassword = "p"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="未找到预设"):
        load_config_from_toml(path, profile="nope")


def test_load_from_toml_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="配置文件未找到"):
        load_config_from_toml(tmp_path / "absent.toml")


def test_load_from_toml_invalid_syntax(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("host = ", encoding="utf-8")
    with pytest.raises(ConfigError, match="读取 TOML 失败"):
        load_config_from_toml(path)


def test_load_from_env(monkeypatch):
    monkeypatch.setenv("SQUAD_RCON_HOST", "4.4.4.4:21120")
    monkeypatch.setenv("SQUAD_RCON_PASS", "envpw")
    monkeypatch.delenv("SQUAD_RCON_PORT", raising=False)
    monkeypatch.delenv("SQUAD_RCON_TIMEOUT", raising=False)
    monkeypatch.delenv("SQUAD_RCON_MAX_PACKET_ID", raising=False)

    config = load_config_from_env()
    assert (config.host, config.port, config.password) == ("4.4.4.4", 21120, "envpw")


def test_load_from_env_empty(monkeypatch):
    for suffix in ("HOST", "PORT", "PASS", "TIMEOUT", "MAX_PACKET_ID"):
        monkeypatch.delenv(f"SQUAD_RCON_{suffix}", raising=False)
    with pytest.raises(ConfigError, match="未检测到"):
        load_config_from_env()
