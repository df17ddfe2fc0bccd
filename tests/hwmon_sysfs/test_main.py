"""tests/hwmon_sysfs/test_main.py: CLI (list / state / pwms-to-max)"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from hwmon_sysfs import config
from hwmon_sysfs.main import main


@pytest.fixture(autouse=True)
def _no_system_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(tmp_path / "no-config.yaml"))
    monkeypatch.delenv("HWMON_ROOT", raising=False)


def _make_root(tmp_path: Path) -> Path:
    root = tmp_path / "hwmon"
    device = root / "hwmon0"
    device.mkdir(parents=True)
    files = {
        "name": "coretemp",
        "temp1_input": "45000",
        "temp1_label": "Package id 0",
        "temp1_max": "80000",
        "temp2_input": "0",
        "temp2_fault": "1",
        "pwm1": "128",
        "pwm1_enable": "2",
    }
    for filename, content in files.items():
        (device / filename).write_text(content + "\n")
    return root


class TestList:
    def test_list(self, tmp_path, capsys):
        root = _make_root(tmp_path)
        assert main(["--root", str(root), "list"]) == 0
        out = capsys.readouterr().out
        assert "hwmon0 (coretemp):" in out
        assert "\tPackage id 0: 45°C" in out
        assert "\ttemp2: n/a" in out
        assert "\tpwm1: 50.2%" in out

    def test_default_command_is_list(self, tmp_path, capsys):
        root = _make_root(tmp_path)
        assert main(["--root", str(root)]) == 0
        assert "hwmon0 (coretemp):" in capsys.readouterr().out

    def test_root_from_config(self, tmp_path, capsys):
        root = _make_root(tmp_path)
        cfg = tmp_path / "config.yaml"
        cfg.write_text(f"hwmon:\n  root: {root}\n  strategy: sequential\n")
        assert main(["--config", str(cfg)]) == 0
        assert "coretemp" in capsys.readouterr().out

    def test_missing_root(self, tmp_path):
        assert main(["--root", str(tmp_path / "nope")]) == 1

    def test_missing_explicit_config(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 1


class TestState:
    def test_dump(self, tmp_path, capsys):
        root = _make_root(tmp_path)
        assert main(["--root", str(root), "state", "temp", "1"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# hwmon0 (coretemp) Package id 0")
        assert yaml.safe_load(out) == {"max": "80000"}

    def test_sensor_not_found(self, tmp_path):
        root = _make_root(tmp_path)
        assert main(["--root", str(root), "state", "fan", "1"]) == 1

    def test_unknown_kind(self, tmp_path):
        root = _make_root(tmp_path)
        with pytest.raises(SystemExit):
            main(["--root", str(root), "state", "bogus", "1"])


class TestPwmsToMax:
    def test_sets_manual_full_speed(self, tmp_path):
        root = _make_root(tmp_path)
        assert main(["--root", str(root), "pwms-to-max"]) == 0
        device = root / "hwmon0"
        assert (device / "pwm1_enable").read_text() == "1"
        assert (device / "pwm1").read_text() == "255"
