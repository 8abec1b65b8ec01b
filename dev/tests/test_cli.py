import json
from pathlib import Path

import pytest

import start_bf2_migrator
from bf2_migrator.logging_config import cleanup_logging
from bf2_migrator.patching import Provider
from bf2_migrator.version import __version__


@pytest.fixture
def config_file(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logging": {"file_logging": False, "level": "WARNING"}}), encoding="utf-8")
    yield str(path)
    cleanup_logging()


def test_version(capsys) -> None:
    assert start_bf2_migrator.main(["--version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("BF2 Migrator v")
    assert __version__ in out


def test_detect(make_install, config_file, capsys) -> None:
    install_dir = make_install(Provider.BF2HUB)

    assert start_bf2_migrator.main(["--config", config_file, "--dir", str(install_dir), "--detect"]) == 0

    out = capsys.readouterr().out
    assert "BF2.exe: BF2Hub" in out
    assert "bf2_w32ded.exe: BF2Hub" in out


def test_patch_without_quiesce(make_install, config_file, capsys) -> None:
    install_dir = make_install(Provider.GAMESPY)

    code = start_bf2_migrator.main([
        "--config", config_file, "--dir", str(install_dir), "--patch", "openspy", "--no-quiesce",
    ])

    assert code == 0
    assert "Patched BF2.exe: GameSpy -> OpenSpy" in capsys.readouterr().out


def test_unknown_provider_fails(make_install, config_file, capsys) -> None:
    install_dir = make_install(Provider.GAMESPY)

    code = start_bf2_migrator.main([
        "--config", config_file, "--dir", str(install_dir), "--patch", "nowhere", "--no-quiesce",
    ])

    assert code == 1
    assert "Unknown provider" in capsys.readouterr().out


def test_invalid_config_fails(tmp_path: Path, capsys) -> None:
    path = tmp_path / "config.json"
    path.write_text("[]", encoding="utf-8")

    assert start_bf2_migrator.main(["--config", str(path), "--detect"]) == 1
    assert "Configuration root must be an object" in capsys.readouterr().out


def test_list_profiles(make_profiles, config_file, capsys) -> None:
    profiles_dir = make_profiles(
        {"0001": ("Pilot", "Pilot", "pilot@example.com"), "0002": ("Offline", None, None)},
        default_key="0001",
    )

    code = start_bf2_migrator.main(
        ["--config", config_file, "--profiles-dir", str(profiles_dir), "--list-profiles"],
    )

    assert code == 0

    out = capsys.readouterr().out
    assert "0001  Pilot (default)" in out
    assert "0002  Offline" in out


class RecordingClient:
    instances = []

    def __init__(self, base_url, timeout):
        self.calls = []
        RecordingClient.instances.append(self)

    def create_account(self, email, password, partner_code=0):
        self.calls.append(("account", email, password))

    def get_profiles(self):
        return []

    def create_profile(self, nick, namespace_id):
        self.calls.append(("profile", nick, namespace_id))


@pytest.fixture
def offline_migration(monkeypatch):
    import bf2_migrator.clients

    RecordingClient.instances = []
    monkeypatch.setattr(bf2_migrator.clients, "OpenSpyClient", RecordingClient)
    monkeypatch.setattr("getpass.getpass", lambda prompt="": "secret")
    return RecordingClient.instances


@pytest.mark.parametrize("selection, nick", [([], "TankDriver"), (["Pilot"], "Pilot"), (["1"], "Pilot")])
def test_migrate_profile_by_key_name_or_default(make_profiles, config_file, offline_migration, capsys,
                                                selection, nick) -> None:
    profiles_dir = make_profiles(
        {"0001": ("Pilot", "Pilot", "pilot@example.com"), "0002": ("Tank", "TankDriver", "tank@example.com")},
        default_key="0002",
    )

    code = start_bf2_migrator.main(
        ["--config", config_file, "--profiles-dir", str(profiles_dir), "--migrate-profile", *selection],
    )

    assert code == 0
    assert offline_migration[0].calls[-1] == ("profile", nick, 12)
    assert f"Migrated {nick!r} to OpenSpy" in capsys.readouterr().out


def test_migrate_singleplayer_profile_fails(make_profiles, config_file, offline_migration, capsys) -> None:
    profiles_dir = make_profiles({"0001": ("Offline", None, None)}, default_key="0001")

    code = start_bf2_migrator.main(["--config", config_file, "--profiles-dir", str(profiles_dir), "--migrate-profile"])

    assert code == 1
    assert offline_migration == []
    assert "singleplayer profile" in capsys.readouterr().out
