"""tests/hwmon_sysfs/test_sensors.py: Sensor のユニットテスト

tmp_path 上にダミーの hwmon デバイスディレクトリを作り、実機なしでテストする。
"""

from __future__ import annotations

import errno
from pathlib import Path
from unittest.mock import patch

import pytest

from hwmon_sysfs.capabilities import Capability
from hwmon_sysfs.errors import (
    CapabilityNotComposed,
    ConversionError,
    DisabledSensor,
    FaultySensor,
    InsufficientRights,
    NotWritable,
    SubtypeNotSupported,
    UnexpectedIo,
)
from hwmon_sysfs.sensors import Sensor
from hwmon_sysfs.subfunction import SensorKind, Subfunction
from hwmon_sysfs.units import (
    AngularVelocity,
    FanDivisor,
    Pwm,
    PwmEnable,
    Temperature,
    TempType,
    Voltage,
)


# ------------------------------------------------------------------ #
# ヘルパー
# ------------------------------------------------------------------ #

def _make_device(tmp_path: Path, files: dict[str, str]) -> Path:
    """テスト用 hwmon デバイスディレクトリを作成し、属性ファイルを書く。"""
    device_dir = tmp_path / "hwmon0"
    device_dir.mkdir()
    (device_dir / "name").write_text("testchip\n")
    for filename, content in files.items():
        (device_dir / filename).write_text(content + "\n")
    return device_dir


# ------------------------------------------------------------------ #
# TestSensorIdentity
# ------------------------------------------------------------------ #

class TestSensorIdentity:
    def test_name_from_label(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_label": "Package id 0"})
        assert Sensor(SensorKind.TEMP, 1, device).name() == "Package id 0"

    def test_name_without_label(self, tmp_path):
        device = _make_device(tmp_path, {"in0_input": "1200"})
        assert Sensor(SensorKind.VOLTAGE, 0, device).name() == "in0"

    def test_device_path_is_copied(self, tmp_path):
        device = _make_device(tmp_path, {})
        path_str = str(device)
        sensor = Sensor(SensorKind.TEMP, 1, path_str)
        assert sensor.device_path == device
        assert isinstance(sensor.device_path, Path)

    def test_equality(self, tmp_path):
        device = _make_device(tmp_path, {})
        assert Sensor(SensorKind.TEMP, 1, device) == Sensor(SensorKind.TEMP, 1, str(device))
        assert Sensor(SensorKind.TEMP, 1, device) != Sensor(SensorKind.FAN, 1, device)
        assert len({Sensor(SensorKind.TEMP, 1, device), Sensor(SensorKind.TEMP, 1, device)}) == 1

    def test_subfunction_path(self, tmp_path):
        sensor = Sensor(SensorKind.FAN, 2, tmp_path)
        assert sensor.subfunction_path(Subfunction.MIN) == tmp_path / "fan2_min"


# ------------------------------------------------------------------ #
# TestSensorRead
# ------------------------------------------------------------------ #

class TestSensorRead:
    def test_read_input(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000"})
        assert Sensor(SensorKind.TEMP, 1, device).read_input() == Temperature(45000)

    def test_missing_min_only_affects_min(self, tmp_path):
        """temp1_input と temp1_max はあるが temp1_min はない"""
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_max": "80000"})
        sensor = Sensor(SensorKind.TEMP, 1, device)
        with pytest.raises(SubtypeNotSupported) as exc_info:
            sensor.read_min()
        assert exc_info.value.subfunction is Subfunction.MIN
        assert sensor.read_input().degrees_celsius == pytest.approx(45.0)
        assert sensor.read_max().degrees_celsius == pytest.approx(80.0)

    def test_typed_extras(self, tmp_path):
        device = _make_device(tmp_path, {
            "temp1_input": "45000",
            "temp1_type": "4",
            "temp1_crit_alarm": "0",
            "fan1_input": "1200",
            "fan1_target": "1500",
            "fan1_div": "8",
        })
        temp = Sensor(SensorKind.TEMP, 1, device)
        fan = Sensor(SensorKind.FAN, 1, device)
        assert temp.read(Capability.TYPE) is TempType.THERMISTOR
        assert temp.read_crit_alarm() is False
        assert fan.read_input() == AngularVelocity(1200)
        assert fan.read_target().rpm == 1500
        assert fan.read_divisor() == FanDivisor(8)

    def test_capability_not_composed_does_not_touch_sysfs(self, tmp_path):
        sensor = Sensor(SensorKind.PWM, 1, tmp_path)
        with patch("hwmon_sysfs.sysfs.read_attr") as mock_read:
            with pytest.raises(CapabilityNotComposed):
                sensor.read(Capability.ALARM)
            with pytest.raises(TypeError):
                sensor.read_max()
        mock_read.assert_not_called()

    def test_unknown_named_method(self, tmp_path):
        sensor = Sensor(SensorKind.TEMP, 1, tmp_path)
        with pytest.raises(AttributeError):
            sensor.read_bogus()
        with pytest.raises(AttributeError):
            sensor.frobnicate()

    def test_dir_lists_named_methods(self, tmp_path):
        names = dir(Sensor(SensorKind.PWM, 1, tmp_path))
        assert "read_pwm" in names
        assert "write_pwm_enable" in names
        assert "read_max" not in names

    def test_bad_content_is_conversion_error(self, tmp_path):
        device = _make_device(tmp_path, {"in0_input": "garbage"})
        with pytest.raises(ConversionError):
            Sensor(SensorKind.VOLTAGE, 0, device).read_input()

    def test_permission_denied(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000"})
        with patch.object(Path, "read_text", side_effect=PermissionError(errno.EACCES, "denied")):
            with pytest.raises(InsufficientRights) as exc_info:
                Sensor(SensorKind.TEMP, 1, device).read_raw(Subfunction.INPUT)
        assert exc_info.value.path == device / "temp1_input"

    def test_other_io_error(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000"})
        with patch.object(Path, "read_text", side_effect=OSError(errno.EIO, "I/O error")):
            with pytest.raises(UnexpectedIo) as exc_info:
                Sensor(SensorKind.TEMP, 1, device).read_raw(Subfunction.INPUT)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_intrusion_alarm(self, tmp_path):
        device = _make_device(tmp_path, {"intrusion0_alarm": "1"})
        sensor = Sensor(SensorKind.INTRUSION, 0, device)
        assert sensor.read_alarm() is True
        with pytest.raises(CapabilityNotComposed):
            sensor.read_input()


# ------------------------------------------------------------------ #
# TestFaultyAndDisabled
# ------------------------------------------------------------------ #

class TestFaultyAndDisabled:
    def test_fault_one_raises(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_fault": "1"})
        with pytest.raises(FaultySensor):
            Sensor(SensorKind.TEMP, 1, device).read_input()

    def test_fan_fault(self, tmp_path):
        device = _make_device(tmp_path, {"fan1_input": "0", "fan1_fault": "1"})
        with pytest.raises(FaultySensor):
            Sensor(SensorKind.FAN, 1, device).read_input()

    def test_fault_zero_reads(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_fault": "0"})
        assert Sensor(SensorKind.TEMP, 1, device).read_input() == Temperature(45000)

    def test_absent_fault_reads(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000"})
        assert Sensor(SensorKind.TEMP, 1, device).read_input() == Temperature(45000)

    def test_garbled_fault_propagates(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_fault": "x"})
        with pytest.raises(ConversionError):
            Sensor(SensorKind.TEMP, 1, device).read_input()

    def test_voltage_ignores_fault_file(self, tmp_path):
        """in* は Faulty 機能を持たない"""
        device = _make_device(tmp_path, {"in0_input": "1200", "in0_fault": "1"})
        assert Sensor(SensorKind.VOLTAGE, 0, device).read_input() == Voltage(1200)

    def test_disabled(self, tmp_path):
        device = _make_device(tmp_path, {"in1_input": "0", "in1_enable": "0"})
        with pytest.raises(DisabledSensor):
            Sensor(SensorKind.VOLTAGE, 1, device).read_input()

    def test_enabled(self, tmp_path):
        device = _make_device(tmp_path, {"in1_input": "3300", "in1_enable": "1"})
        assert Sensor(SensorKind.VOLTAGE, 1, device).read_input().volts == pytest.approx(3.3)


# ------------------------------------------------------------------ #
# TestSensorWrite
# ------------------------------------------------------------------ #

class TestSensorWrite:
    def test_write_then_read_back(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_max": "80000"})
        sensor = Sensor(SensorKind.TEMP, 1, device, writable=True)
        sensor.write_max(Temperature.from_degrees_celsius(85))
        assert (device / "temp1_max").read_text() == "85000"
        assert sensor.read_max() == Temperature(85000)

    def test_pwm_to_max(self, tmp_path):
        device = _make_device(tmp_path, {"pwm1": "128", "pwm1_enable": "2"})
        sensor = Sensor(SensorKind.PWM, 1, device, writable=True)
        sensor.write_pwm_enable(PwmEnable.MANUAL_CONTROL)
        sensor.write(Capability.PWM, Pwm.from_percent(100))
        assert sensor.read_pwm_enable() is PwmEnable.MANUAL_CONTROL
        assert sensor.read_pwm() == Pwm(255)

    def test_read_only_sensor_rejects_write(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_max": "80000"})
        sensor = Sensor(SensorKind.TEMP, 1, device)
        with pytest.raises(NotWritable):
            sensor.write_max(Temperature(1000))
        assert (device / "temp1_max").read_text() == "80000\n"

    def test_read_only_subfunction_rejects_write(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000"})
        sensor = Sensor(SensorKind.TEMP, 1, device, writable=True)
        with pytest.raises(NotWritable):
            sensor.write(Capability.INPUT, Temperature(1000))
        with pytest.raises(NotWritable):
            sensor.write_raw(Subfunction.ALARM, "1")

    def test_wrong_value_type(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_max": "80000"})
        sensor = Sensor(SensorKind.TEMP, 1, device, writable=True)
        with pytest.raises(ValueError):
            sensor.write_max(Voltage(1000))

    def test_write_missing_file(self, tmp_path):
        device = _make_device(tmp_path, {})
        sensor = Sensor(SensorKind.TEMP, 1, device, writable=True)
        with pytest.raises(SubtypeNotSupported):
            sensor.write_min(Temperature(1000))

    def test_reset_history(self, tmp_path):
        device = _make_device(tmp_path, {"in0_reset_history": "0"})
        Sensor(SensorKind.VOLTAGE, 0, device, writable=True).reset_history()
        assert (device / "in0_reset_history").read_text() == "1"

    def test_reset_history_unsupported(self, tmp_path):
        device = _make_device(tmp_path, {})
        with pytest.raises(SubtypeNotSupported):
            Sensor(SensorKind.VOLTAGE, 0, device, writable=True).reset_history()


# ------------------------------------------------------------------ #
# TestSupportedSubfunctions
# ------------------------------------------------------------------ #

class TestSupportedSubfunctions:
    def test_supported_read(self, tmp_path):
        device = _make_device(tmp_path, {
            "temp1_input": "45000",
            "temp1_max": "80000",
            "temp1_label": "CPU",
            "temp1_reset_history": "0",
        })
        supported = Sensor(SensorKind.TEMP, 1, device).supported_read_subfunctions()
        assert set(supported) == {Subfunction.INPUT, Subfunction.MAX, Subfunction.LABEL}

    def test_supported_write_uses_mode_bits(self, tmp_path):
        device = _make_device(tmp_path, {"temp1_input": "45000", "temp1_max": "80000", "temp1_crit": "90000"})
        (device / "temp1_crit").chmod(0o444)
        supported = Sensor(SensorKind.TEMP, 1, device, writable=True).supported_write_subfunctions()
        assert supported == [Subfunction.MAX]

    def test_supported_write_requires_writable_sensor(self, tmp_path):
        with pytest.raises(NotWritable):
            Sensor(SensorKind.TEMP, 1, tmp_path).supported_write_subfunctions()
