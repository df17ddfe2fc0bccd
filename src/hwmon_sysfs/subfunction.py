"""サブファンクションのアドレス指定

センサー <prefix><index> は各項目 (サブファンクション) を 1 ファイルで公開する:

    <device_path>/<prefix><index><suffix>

例: temp1_input, fan2_min, in0_lcrit_alarm, サフィックスなしの pwm1。
サブファンクションは必ずいずれか 1 つのアクセス区分 (読み取り専用 /
読み書き / 書き込み専用) に属する。
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Union

from . import units


class Access(enum.Enum):
    READ_ONLY = "ro"
    READ_WRITE = "rw"
    WRITE_ONLY = "wo"


class Subfunction(enum.Enum):
    """センサー項目 1 つ分のファイルサフィックスとアクセス区分"""

    # read-only
    INPUT = ("_input", Access.READ_ONLY)
    FAULT = ("_fault", Access.READ_ONLY)
    LABEL = ("_label", Access.READ_ONLY)
    TYPE = ("_type", Access.READ_ONLY)
    LOWEST = ("_lowest", Access.READ_ONLY)
    HIGHEST = ("_highest", Access.READ_ONLY)
    INPUT_LOWEST = ("_input_lowest", Access.READ_ONLY)
    INPUT_HIGHEST = ("_input_highest", Access.READ_ONLY)
    AVERAGE = ("_average", Access.READ_ONLY)
    AVERAGE_INTERVAL_MAX = ("_average_interval_max", Access.READ_ONLY)
    AVERAGE_INTERVAL_MIN = ("_average_interval_min", Access.READ_ONLY)
    AVERAGE_HIGHEST = ("_average_highest", Access.READ_ONLY)
    AVERAGE_LOWEST = ("_average_lowest", Access.READ_ONLY)
    ACCURACY = ("_accuracy", Access.READ_ONLY)
    CAP_MIN = ("_cap_min", Access.READ_ONLY)
    CAP_MAX = ("_cap_max", Access.READ_ONLY)
    ALARM = ("_alarm", Access.READ_ONLY)
    MIN_ALARM = ("_min_alarm", Access.READ_ONLY)
    MAX_ALARM = ("_max_alarm", Access.READ_ONLY)
    CRIT_ALARM = ("_crit_alarm", Access.READ_ONLY)
    LOW_CRIT_ALARM = ("_lcrit_alarm", Access.READ_ONLY)
    CAP_ALARM = ("_cap_alarm", Access.READ_ONLY)
    EMERGENCY_ALARM = ("_emergency_alarm", Access.READ_ONLY)

    # read-write
    ENABLE = ("_enable", Access.READ_WRITE)
    MAX = ("_max", Access.READ_WRITE)
    MIN = ("_min", Access.READ_WRITE)
    MAX_HYST = ("_max_hyst", Access.READ_WRITE)
    MIN_HYST = ("_min_hyst", Access.READ_WRITE)
    CRIT = ("_crit", Access.READ_WRITE)
    CRIT_HYST = ("_crit_hyst", Access.READ_WRITE)
    EMERGENCY = ("_emergency", Access.READ_WRITE)
    EMERGENCY_HYST = ("_emergency_hyst", Access.READ_WRITE)
    LOW_CRIT = ("_lcrit", Access.READ_WRITE)
    LOW_CRIT_HYST = ("_lcrit_hyst", Access.READ_WRITE)
    OFFSET = ("_offset", Access.READ_WRITE)
    DIV = ("_div", Access.READ_WRITE)
    PULSES = ("_pulses", Access.READ_WRITE)
    TARGET = ("_target", Access.READ_WRITE)
    AVERAGE_INTERVAL = ("_average_interval", Access.READ_WRITE)
    AVERAGE_MAX = ("_average_max", Access.READ_WRITE)
    AVERAGE_MIN = ("_average_min", Access.READ_WRITE)
    CAP = ("_cap", Access.READ_WRITE)
    CAP_HYST = ("_cap_hyst", Access.READ_WRITE)
    PWM = ("", Access.READ_WRITE)
    MODE = ("_mode", Access.READ_WRITE)
    FREQ = ("_freq", Access.READ_WRITE)
    AUTO_CHANNELS_TEMP = ("_auto_channels_temp", Access.READ_WRITE)
    BEEP = ("_beep", Access.READ_WRITE)

    # write-only
    RESET_HISTORY = ("_reset_history", Access.WRITE_ONLY)

    def __init__(self, suffix: str, access: Access) -> None:
        self.suffix = suffix
        self.access = access

    @property
    def readable(self) -> bool:
        return self.access is not Access.WRITE_ONLY

    @property
    def writable(self) -> bool:
        return self.access is not Access.READ_ONLY

    @classmethod
    def read_list(cls) -> list[Subfunction]:
        """読み取りで存在確認できるサブファンクション"""
        return [sub for sub in cls if sub.readable]

    @classmethod
    def read_write_list(cls) -> list[Subfunction]:
        return [sub for sub in cls if sub.access is Access.READ_WRITE]

    @classmethod
    def write_list(cls) -> list[Subfunction]:
        return [sub for sub in cls if sub.writable]

    @classmethod
    def from_name(cls, name: str) -> Subfunction:
        """列挙名 ("max_hyst") またはファイルサフィックス ("_max_hyst") で引く。"""
        try:
            return cls[name.upper()]
        except KeyError:
            pass
        for sub in cls:
            if sub.suffix and sub.suffix == name:
                return sub
        raise KeyError(name)


class SensorKind(enum.Enum):
    """センサー種別: ファイル接頭辞, 先頭番号, プライマリサブファンクション, 値の型"""

    CURRENT = ("curr", 1, Subfunction.INPUT, units.Current)
    ENERGY = ("energy", 1, Subfunction.INPUT, units.Energy)
    FAN = ("fan", 1, Subfunction.INPUT, units.AngularVelocity)
    HUMIDITY = ("humidity", 1, Subfunction.INPUT, units.Ratio)
    INTRUSION = ("intrusion", 0, Subfunction.ALARM, bool)
    POWER = ("power", 1, Subfunction.INPUT, units.Power)
    PWM = ("pwm", 1, Subfunction.PWM, units.Pwm)
    TEMP = ("temp", 1, Subfunction.INPUT, units.Temperature)
    VOLTAGE = ("in", 0, Subfunction.INPUT, units.Voltage)

    def __init__(self, prefix: str, first_index: int, primary: Subfunction, value_type: type) -> None:
        self.prefix = prefix
        self.first_index = first_index
        self.primary = primary
        self.value_type = value_type

    @classmethod
    def from_name(cls, name: str) -> SensorKind:
        """列挙名 ("temp") またはファイル接頭辞 ("in") で引く。"""
        try:
            return cls[name.upper()]
        except KeyError:
            pass
        for kind in cls:
            if kind.prefix == name:
                return kind
        raise KeyError(name)


def subfunction_path(
    device_path: Union[str, Path],
    kind: SensorKind,
    index: int,
    subfunction: Subfunction,
) -> Path:
    """センサー <prefix><index> の subfunction に対応するファイルのパス"""
    return Path(device_path) / f"{kind.prefix}{index}{subfunction.suffix}"
