"""センサー種別ごとの機能 (capability) テーブル

機能は「サブファンクション + 値型」の組。値型が None の機能はセンサー種別の
値型 (temp なら Temperature) を使う。

各種別が持つ機能は KIND_CAPABILITIES で固定されており、継承ではなく
このテーブルで合成する。
"""

from __future__ import annotations

import enum
from typing import Optional

from . import units
from .subfunction import SensorKind, Subfunction


class Capability(enum.Enum):
    # 共通
    INPUT = ("input", Subfunction.INPUT, None)
    ENABLE = ("enable", Subfunction.ENABLE, bool)
    MIN = ("min", Subfunction.MIN, None)
    MAX = ("max", Subfunction.MAX, None)
    CRIT = ("crit", Subfunction.CRIT, None)
    LOW_CRIT = ("low_crit", Subfunction.LOW_CRIT, None)
    AVERAGE = ("average", Subfunction.AVERAGE, None)
    LOWEST = ("lowest", Subfunction.LOWEST, None)
    HIGHEST = ("highest", Subfunction.HIGHEST, None)
    FAULTY = ("faulty", Subfunction.FAULT, bool)
    BEEP = ("beep", Subfunction.BEEP, bool)
    ALARM = ("alarm", Subfunction.ALARM, bool)
    MIN_ALARM = ("min_alarm", Subfunction.MIN_ALARM, bool)
    MAX_ALARM = ("max_alarm", Subfunction.MAX_ALARM, bool)
    CRIT_ALARM = ("crit_alarm", Subfunction.CRIT_ALARM, bool)
    LOW_CRIT_ALARM = ("low_crit_alarm", Subfunction.LOW_CRIT_ALARM, bool)
    CAP_ALARM = ("cap_alarm", Subfunction.CAP_ALARM, bool)
    EMERGENCY_ALARM = ("emergency_alarm", Subfunction.EMERGENCY_ALARM, bool)

    # temp
    TYPE = ("type", Subfunction.TYPE, units.TempType)
    OFFSET = ("offset", Subfunction.OFFSET, None)
    MAX_HYST = ("max_hyst", Subfunction.MAX_HYST, None)
    MIN_HYST = ("min_hyst", Subfunction.MIN_HYST, None)
    CRIT_HYST = ("crit_hyst", Subfunction.CRIT_HYST, None)
    EMERGENCY = ("emergency", Subfunction.EMERGENCY, None)
    EMERGENCY_HYST = ("emergency_hyst", Subfunction.EMERGENCY_HYST, None)
    LOW_CRIT_HYST = ("low_crit_hyst", Subfunction.LOW_CRIT_HYST, None)

    # fan
    TARGET = ("target", Subfunction.TARGET, units.AngularVelocity)
    DIVISOR = ("divisor", Subfunction.DIV, units.FanDivisor)

    # power
    ACCURACY = ("accuracy", Subfunction.ACCURACY, units.Ratio)
    CAP = ("cap", Subfunction.CAP, None)
    CAP_MAX = ("cap_max", Subfunction.CAP_MAX, None)
    CAP_MIN = ("cap_min", Subfunction.CAP_MIN, None)
    CAP_HYST = ("cap_hyst", Subfunction.CAP_HYST, None)
    AVERAGE_INTERVAL = ("average_interval", Subfunction.AVERAGE_INTERVAL, units.Duration)
    AVERAGE_INTERVAL_MAX = ("average_interval_max", Subfunction.AVERAGE_INTERVAL_MAX, units.Duration)
    AVERAGE_INTERVAL_MIN = ("average_interval_min", Subfunction.AVERAGE_INTERVAL_MIN, units.Duration)
    AVERAGE_HIGHEST = ("average_highest", Subfunction.AVERAGE_HIGHEST, None)
    AVERAGE_LOWEST = ("average_lowest", Subfunction.AVERAGE_LOWEST, None)
    AVERAGE_MAX = ("average_max", Subfunction.AVERAGE_MAX, None)
    AVERAGE_MIN = ("average_min", Subfunction.AVERAGE_MIN, None)

    # pwm
    PWM = ("pwm", Subfunction.PWM, units.Pwm)
    PWM_ENABLE = ("pwm_enable", Subfunction.ENABLE, units.PwmEnable)
    MODE = ("mode", Subfunction.MODE, units.PwmMode)
    FREQUENCY = ("frequency", Subfunction.FREQ, units.Frequency)

    def __init__(self, method_name: str, subfunction: Subfunction, value_type: Optional[type]) -> None:
        self.method_name = method_name
        self.subfunction = subfunction
        self._value_type = value_type

    def value_type_for(self, kind: SensorKind) -> type:
        """kind のセンサーで読み書きする際の値型"""
        return self._value_type if self._value_type is not None else kind.value_type

    @property
    def writable(self) -> bool:
        return self.subfunction.writable

    @classmethod
    def from_method_name(cls, name: str) -> Capability:
        for cap in cls:
            if cap.method_name == name:
                return cap
        raise KeyError(name)


C = Capability

_LIMITS_FULL = (
    C.INPUT, C.ENABLE, C.MIN, C.MAX, C.CRIT, C.LOW_CRIT, C.AVERAGE, C.LOWEST, C.HIGHEST,
    C.ALARM, C.MIN_ALARM, C.MAX_ALARM, C.CRIT_ALARM, C.LOW_CRIT_ALARM, C.BEEP,
)

KIND_CAPABILITIES: dict[SensorKind, frozenset[Capability]] = {
    SensorKind.CURRENT: frozenset(_LIMITS_FULL),
    SensorKind.VOLTAGE: frozenset(_LIMITS_FULL),
    SensorKind.ENERGY: frozenset({C.INPUT, C.ENABLE}),
    SensorKind.HUMIDITY: frozenset({C.INPUT, C.ENABLE}),
    SensorKind.FAN: frozenset({
        C.INPUT, C.ENABLE, C.MIN, C.MAX, C.FAULTY, C.ALARM, C.MIN_ALARM, C.MAX_ALARM,
        C.BEEP, C.TARGET, C.DIVISOR,
    }),
    SensorKind.INTRUSION: frozenset({C.ALARM, C.BEEP}),
    SensorKind.POWER: frozenset({
        C.INPUT, C.ENABLE, C.MAX, C.CRIT, C.AVERAGE, C.HIGHEST, C.LOWEST,
        C.ALARM, C.CRIT_ALARM, C.CAP_ALARM, C.BEEP,
        C.ACCURACY, C.CAP, C.CAP_MAX, C.CAP_MIN, C.CAP_HYST,
        C.AVERAGE_INTERVAL, C.AVERAGE_INTERVAL_MAX, C.AVERAGE_INTERVAL_MIN,
        C.AVERAGE_HIGHEST, C.AVERAGE_LOWEST, C.AVERAGE_MAX, C.AVERAGE_MIN,
    }),
    SensorKind.PWM: frozenset({C.PWM, C.PWM_ENABLE, C.MODE, C.FREQUENCY}),
    SensorKind.TEMP: frozenset({
        C.INPUT, C.ENABLE, C.MIN, C.MAX, C.CRIT, C.LOW_CRIT, C.FAULTY,
        C.ALARM, C.MIN_ALARM, C.MAX_ALARM, C.CRIT_ALARM, C.LOW_CRIT_ALARM, C.EMERGENCY_ALARM,
        C.BEEP,
        C.TYPE, C.OFFSET, C.MAX_HYST, C.MIN_HYST, C.CRIT_HYST,
        C.EMERGENCY, C.EMERGENCY_HYST, C.LOW_CRIT_HYST,
    }),
}

del C


def capabilities_of(kind: SensorKind) -> frozenset[Capability]:
    return KIND_CAPABILITIES[kind]
