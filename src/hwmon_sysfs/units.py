"""sysfs raw テキスト <-> 値型 の変換レイヤ

hwmon の属性ファイルは全て ASCII の整数テキストで、単位はファイル種別ごとに固定:

  temp*_*        millidegree Celsius (符号あり)
  in*_*          millivolt           (符号あり)
  curr*_*        milliampere         (符号あり)
  power*_*       microwatt
  energy*_*      microjoule
  fan*_*         RPM
  pwm*_freq      Hz
  humidity*_*    milli-percent
  *_interval     millisecond
  pwm*           duty cycle 0-255

値型は sysfs の単位の整数をそのまま保持するため、to_raw() は丸めを必要としない。
人間単位からの生成 (from_degrees_celsius 等) は 10 進演算で最近接丸め
(偶数丸め, ROUND_HALF_EVEN) を行う: 0.0025 °C -> 2 m°C, 0.0015 °C -> 2 m°C。
"""

from __future__ import annotations

import datetime
import enum
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import ClassVar, TypeVar, Union

from .errors import ConversionError, InvalidValueError

Number = Union[int, float, Decimal]
Q = TypeVar("Q", bound="Quantity")

I32_MIN = -(2 ** 31)
I32_MAX = 2 ** 31 - 1
U32_MAX = 2 ** 32 - 1

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


# ------------------------------------------------------------------ #
# 整数 / bool ヘルパー
# ------------------------------------------------------------------ #

def parse_int(raw: str, *, signed: bool, minimum: int, maximum: int, target: str) -> int:
    """raw テキストを整数に変換する。

    前後の空白を除いた後、符号 (unsigned は + のみ) と ASCII 数字以外を含むと失敗する。
    int() が受け付ける "1_000" や全角数字もここでは拒否される。

    Raises:
        ConversionError: 文法違反、または [minimum, maximum] の範囲外
    """
    text = raw.strip()
    pattern = _SIGNED_RE if signed else _UNSIGNED_RE
    if not pattern.fullmatch(text):
        raise ConversionError(raw, target)
    value = int(text)
    if not minimum <= value <= maximum:
        raise ConversionError(raw, target)
    return value


def bool_from_raw(raw: str) -> bool:
    """"1" -> True, "0" -> False。それ以外は ConversionError。"""
    text = raw.strip()
    if text == "1":
        return True
    if text == "0":
        return False
    raise ConversionError(raw, "bool")


def bool_to_raw(value: bool) -> str:
    return "1" if value else "0"


def _scale(value: Number, factor: Decimal, minimum: int, maximum: int, target: str) -> int:
    """人間単位の値を factor 倍して sysfs 単位の整数に丸める (偶数丸め)。"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidValueError(value, target)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidValueError(value, target)
        # repr は最短表現なので 0.0025 は 2 進誤差を含まない Decimal('0.0025') になる
        exact = Decimal(repr(value))
    else:
        exact = Decimal(value)
        if not exact.is_finite():
            raise InvalidValueError(value, target)
    product = exact * factor
    if not minimum - 1 <= product <= maximum + 1:
        raise InvalidValueError(value, target)
    scaled = int(product.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))
    if not minimum <= scaled <= maximum:
        raise InvalidValueError(value, target)
    return scaled


# ------------------------------------------------------------------ #
# 数値型の基底
# ------------------------------------------------------------------ #

@dataclass(frozen=True, order=True)
class Quantity:
    """sysfs 単位の整数を 1 つ保持する値型の基底。

    サブクラスはクラス変数で符号・範囲・人間単位への倍率を宣言する。
    """

    value: int

    SIGNED: ClassVar[bool] = False
    MINIMUM: ClassVar[int] = 0
    MAXIMUM: ClassVar[int] = U32_MAX
    SCALE: ClassVar[Decimal] = Decimal(1)

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidValueError(self.value, type(self).__name__)
        if not self.MINIMUM <= self.value <= self.MAXIMUM:
            raise InvalidValueError(self.value, type(self).__name__)

    @classmethod
    def from_raw(cls: type[Q], raw: str) -> Q:
        """sysfs のファイル内容から生成する。

        Raises:
            ConversionError: raw が整数文法に合わない、または範囲外
        """
        return cls(parse_int(
            raw,
            signed=cls.SIGNED,
            minimum=cls.MINIMUM,
            maximum=cls.MAXIMUM,
            target=cls.__name__,
        ))

    def to_raw(self) -> str:
        return str(self.value)

    @classmethod
    def _from_human(cls: type[Q], value: Number) -> Q:
        return cls(_scale(value, cls.SCALE, cls.MINIMUM, cls.MAXIMUM, cls.__name__))

    def _to_human(self) -> float:
        return float(Decimal(self.value) / self.SCALE)

    def __int__(self) -> int:
        return self.value


class Temperature(Quantity):
    """温度 (millidegree Celsius)"""

    SIGNED = True
    MINIMUM = I32_MIN
    MAXIMUM = I32_MAX
    SCALE = Decimal(1000)

    @classmethod
    def from_degrees_celsius(cls, celsius: Number) -> Temperature:
        return cls._from_human(celsius)

    @classmethod
    def from_degrees_fahrenheit(cls, fahrenheit: Number) -> Temperature:
        if isinstance(fahrenheit, bool) or not isinstance(fahrenheit, (int, float, Decimal)):
            raise InvalidValueError(fahrenheit, cls.__name__)
        if isinstance(fahrenheit, float) and not math.isfinite(fahrenheit):
            raise InvalidValueError(fahrenheit, cls.__name__)
        exact = Decimal(repr(fahrenheit)) if isinstance(fahrenheit, float) else Decimal(fahrenheit)
        return cls._from_human((exact - 32) * 5 / 9)

    @property
    def millidegrees_celsius(self) -> int:
        return self.value

    @property
    def degrees_celsius(self) -> float:
        return self._to_human()

    @property
    def degrees_fahrenheit(self) -> float:
        return self.degrees_celsius * 9 / 5 + 32

    def __str__(self) -> str:
        return f"{self.degrees_celsius:g}°C"


class Voltage(Quantity):
    """電圧 (millivolt)"""

    SIGNED = True
    MINIMUM = I32_MIN
    MAXIMUM = I32_MAX
    SCALE = Decimal(1000)

    @classmethod
    def from_volts(cls, volts: Number) -> Voltage:
        return cls._from_human(volts)

    @property
    def millivolts(self) -> int:
        return self.value

    @property
    def volts(self) -> float:
        return self._to_human()

    def __str__(self) -> str:
        return f"{self.volts:g}V"


class Current(Quantity):
    """電流 (milliampere)"""

    SIGNED = True
    MINIMUM = I32_MIN
    MAXIMUM = I32_MAX
    SCALE = Decimal(1000)

    @classmethod
    def from_amperes(cls, amperes: Number) -> Current:
        return cls._from_human(amperes)

    @property
    def milliamperes(self) -> int:
        return self.value

    @property
    def amperes(self) -> float:
        return self._to_human()

    def __str__(self) -> str:
        return f"{self.amperes:g}A"


class Power(Quantity):
    """電力 (microwatt)"""

    SCALE = Decimal(1_000_000)

    @classmethod
    def from_watts(cls, watts: Number) -> Power:
        return cls._from_human(watts)

    @property
    def microwatts(self) -> int:
        return self.value

    @property
    def watts(self) -> float:
        return self._to_human()

    def __str__(self) -> str:
        return f"{self.watts:g}W"


class Energy(Quantity):
    """エネルギー (microjoule)"""

    SCALE = Decimal(1_000_000)

    @classmethod
    def from_joules(cls, joules: Number) -> Energy:
        return cls._from_human(joules)

    @property
    def microjoules(self) -> int:
        return self.value

    @property
    def joules(self) -> float:
        return self._to_human()

    def __str__(self) -> str:
        return f"{self.joules:g}J"


class AngularVelocity(Quantity):
    """回転数 (RPM)"""

    @classmethod
    def from_rpm(cls, rpm: Number) -> AngularVelocity:
        return cls._from_human(rpm)

    @property
    def rpm(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value}rpm"


class Frequency(Quantity):
    """周波数 (Hz)"""

    @classmethod
    def from_hertz(cls, hertz: Number) -> Frequency:
        return cls._from_human(hertz)

    @property
    def hertz(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value}Hz"


class Ratio(Quantity):
    """百分率 (milli-percent)。湿度と電力計の精度に使う。"""

    SCALE = Decimal(1000)

    @classmethod
    def from_percent(cls, percent: Number) -> Ratio:
        return cls._from_human(percent)

    @property
    def millipercent(self) -> int:
        return self.value

    @property
    def percent(self) -> float:
        return self._to_human()

    def __str__(self) -> str:
        return f"{self.percent:g}%"


class Duration(Quantity):
    """時間間隔 (millisecond)"""

    SCALE = Decimal(1000)

    @classmethod
    def from_seconds(cls, seconds: Number) -> Duration:
        return cls._from_human(seconds)

    @classmethod
    def from_timedelta(cls, delta: datetime.timedelta) -> Duration:
        exact = (
            Decimal(delta.days) * 86400
            + Decimal(delta.seconds)
            + Decimal(delta.microseconds) / 1_000_000
        )
        return cls._from_human(exact)

    @property
    def milliseconds(self) -> int:
        return self.value

    @property
    def seconds(self) -> float:
        return self._to_human()

    @property
    def timedelta(self) -> datetime.timedelta:
        return datetime.timedelta(milliseconds=self.value)

    def __str__(self) -> str:
        return f"{self.value}ms"


class Pwm(Quantity):
    """PWM デューティ (0-255)"""

    MAXIMUM = 255
    SCALE = Decimal("2.55")

    @classmethod
    def from_percent(cls, percent: Number) -> Pwm:
        """0-100 % から生成する。範囲外は InvalidValueError。"""
        pwm = cls._from_human(percent)
        # 丸めで 0-255 に収まる値 (-0.1 など) も範囲外として扱う
        if not 0 <= percent <= 100:
            raise InvalidValueError(percent, cls.__name__)
        return pwm

    @property
    def percent(self) -> float:
        return self._to_human()

    def __str__(self) -> str:
        return f"{self.percent:.1f}%"


class FanDivisor(Quantity):
    """ファン回転数の分周比 (2 のべき乗)"""

    MINIMUM = 1

    @classmethod
    def from_value(cls, value: int) -> FanDivisor:
        """value 以上で最小の 2 のべき乗に切り上げる。0 は 1 になる。"""
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidValueError(value, cls.__name__)
        return cls(1 if value <= 1 else 1 << (value - 1).bit_length())

    def __str__(self) -> str:
        return str(self.value)


# ------------------------------------------------------------------ #
# 列挙型
# ------------------------------------------------------------------ #

class _RawEnum(enum.IntEnum):
    """整数コード表を持つ列挙型。未知のコードは ConversionError。"""

    @classmethod
    def from_raw(cls, raw: str):
        code = parse_int(raw, signed=True, minimum=I32_MIN, maximum=I32_MAX, target=cls.__name__)
        try:
            return cls(code)
        except ValueError:
            raise ConversionError(raw, cls.__name__) from None

    def to_raw(self) -> str:
        return str(int(self))


class TempType(_RawEnum):
    """温度センサーの種類 (temp*_type)"""

    CPU_EMBEDDED_DIODE = 1
    TRANSISTOR = 2
    THERMAL_DIODE = 3
    THERMISTOR = 4
    AMD_AMDSI = 5
    INTEL_PECI = 6


class PwmEnable(_RawEnum):
    """PWM 制御モード (pwm*_enable)"""

    FULL_SPEED = 0
    MANUAL_CONTROL = 1
    BIOS_CONTROL = 2


class PwmMode(_RawEnum):
    """ファン駆動方式 (pwm*_mode)"""

    DC = 0
    PWM = 1
    AUTOMATIC = 2


# ------------------------------------------------------------------ #
# 汎用変換
# ------------------------------------------------------------------ #

def from_raw(value_type: type, raw: str):
    """value_type に応じて raw テキストを変換する。

    value_type は Quantity サブクラス、_RawEnum サブクラス、bool、str のいずれか。
    """
    if value_type is bool:
        return bool_from_raw(raw)
    if value_type is str:
        return raw.strip()
    return value_type.from_raw(raw)


def to_raw(value_type: type, value) -> str:
    """value を value_type の raw テキストに変換する。型が合わない場合は InvalidValueError。"""
    if value_type is bool:
        if not isinstance(value, bool):
            raise InvalidValueError(value, "bool")
        return bool_to_raw(value)
    if value_type is str:
        return str(value)
    if not isinstance(value, value_type):
        raise InvalidValueError(value, value_type.__name__)
    return value.to_raw()
