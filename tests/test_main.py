from __future__ import annotations

import socket
from pathlib import Path

from device_aggregator.__main__ import main

from .helpers import write_devices, write_value


def test_dry_run_prints_devices(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    a = write_value(tmp_path / "a.txt", "1.0")
    config = write_devices(tmp_path / "assets.json", {"boiler": (a, "1000")})

    assert main(["--devices", str(config), "--dry-run"]) == 0

    out = capsys.readouterr().out
    assert "boiler" in out
    assert "every 1000ms" in out


def test_dry_run_with_malformed_devices_fails(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "assets.json"
    config.write_text("[1, 2]", encoding="utf-8")

    assert main(["--devices", str(config), "--dry-run"]) == 1


def test_missing_device_list_is_fatal(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert main(["--devices", str(tmp_path / "missing.json")]) == 1


def test_invalid_settings_is_fatal(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = tmp_path / "settings.yaml"
    settings.write_text("channel_capacity: -1\n", encoding="utf-8")

    assert main(["--settings", str(settings), "--dry-run"]) == 1


def test_status_port_in_use_is_fatal(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    a = write_value(tmp_path / "a.txt", "1.0")
    config = write_devices(tmp_path / "assets.json", {"boiler": (a, "1000")})

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen()
        port = busy.getsockname()[1]

        settings = tmp_path / "settings.yaml"
        settings.write_text(
            f"status:\n  host: 127.0.0.1\n  port: {port}\n", encoding="utf-8"
        )

        assert main(["--settings", str(settings), "--devices", str(config)]) == 1
