"""hwmon-sysfs 例外階層

全ての例外は HwmonError を基底とする。

  HwmonError
    UnitError                 値変換の失敗
      ConversionError         raw テキストが解釈できない
      InvalidValueError       人間単位の値が範囲外 / 非有限
    InsufficientRights        パーミッション不足 (読み書き・列挙)
    UnexpectedIo              その他の OSError (原因は __cause__ に連鎖)
    SensorError               センサー単位の操作エラー
      SubtypeNotSupported     サブファンクションのファイルが存在しない
      FaultySensor            _fault == 1
      DisabledSensor          _enable == 0
      CapabilityNotComposed   センサー種別がその機能を持たない
      NotWritable             読み取り専用センサー / サブファンクションへの書き込み
    ParsingError              ディスカバリの失敗 (部分成功なし)
      PathMissing
      PathInvalid
      DeviceNameError
      DeviceDirError
      SensorProbeError
    FeatureNotAvailable       デバイスの任意属性が存在しない
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


class HwmonError(Exception):
    """hwmon-sysfs の全例外の基底クラス"""


# ------------------------------------------------------------------ #
# 値変換
# ------------------------------------------------------------------ #

class UnitError(HwmonError, ValueError):
    """値変換の失敗"""


class ConversionError(UnitError):
    """sysfs の raw テキストを値型に変換できない"""

    def __init__(self, raw: str, target: str) -> None:
        self.raw = raw
        self.target = target
        super().__init__(f"cannot convert {raw!r} to {target}")


class InvalidValueError(UnitError):
    """人間単位の値が非有限、または表現範囲外"""

    def __init__(self, value: Any, target: str) -> None:
        self.value = value
        self.target = target
        super().__init__(f"invalid value for {target}: {value!r}")


# ------------------------------------------------------------------ #
# I/O
# ------------------------------------------------------------------ #

class InsufficientRights(HwmonError):
    """パーミッション不足"""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"insufficient rights for {self.path}")


class UnexpectedIo(HwmonError):
    """予期しない OSError。元の例外は __cause__ に保持される。"""

    def __init__(self, path: Path, operation: str) -> None:
        self.path = Path(path)
        self.operation = operation
        super().__init__(f"unexpected I/O error while {operation} {self.path}")


# ------------------------------------------------------------------ #
# センサー操作
# ------------------------------------------------------------------ #

class SensorError(HwmonError):
    """センサー単位の操作エラー"""


class SubtypeNotSupported(SensorError):
    """サブファンクションのファイルが存在しない (想定内・非致命的)"""

    def __init__(self, subfunction: Any, path: Optional[Path] = None) -> None:
        self.subfunction = subfunction
        self.path = Path(path) if path is not None else None
        super().__init__(f"subfunction {subfunction.name} not supported by this sensor")


class FaultySensor(SensorError):
    """センサーが故障を報告している"""

    def __init__(self, sensor_name: str) -> None:
        self.sensor_name = sensor_name
        super().__init__(f"sensor {sensor_name} reports a fault")


class DisabledSensor(SensorError):
    """センサーが無効化されている"""

    def __init__(self, sensor_name: str) -> None:
        self.sensor_name = sensor_name
        super().__init__(f"sensor {sensor_name} is disabled")


class CapabilityNotComposed(SensorError, TypeError):
    """センサー種別が要求された機能を持たない"""

    def __init__(self, kind: Any, capability: Any) -> None:
        self.kind = kind
        self.capability = capability
        super().__init__(f"{kind.name} sensors have no {capability.name} capability")


class NotWritable(SensorError):
    """書き込み不可能な対象への書き込み"""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"{target} is not writable")


# ------------------------------------------------------------------ #
# ディスカバリ
# ------------------------------------------------------------------ #

class ParsingError(HwmonError):
    """ディスカバリの失敗"""

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class PathMissing(ParsingError):
    """ルートパスが存在しない"""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"hwmon root {path} does not exist")


class PathInvalid(ParsingError):
    """ルートパスがディレクトリではない"""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"hwmon root {path} is not a directory")


class DeviceNameError(ParsingError):
    """デバイスの name ファイルが読めない。path は name ファイル自身。"""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"cannot read device name from {path}")


class DeviceDirError(ParsingError):
    """デバイスディレクトリを列挙できない"""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"cannot list device directory {path}")


class SensorProbeError(ParsingError):
    """センサーのプライマリファイルの確認に失敗"""

    def __init__(self, kind: Any, index: int, path: Path) -> None:
        self.kind = kind
        self.index = index
        super().__init__(path, f"cannot probe {kind.prefix}{index} at {path}")


# ------------------------------------------------------------------ #
# デバイス任意属性
# ------------------------------------------------------------------ #

class FeatureNotAvailable(HwmonError):
    """update_interval / beep_enable / device が存在しない"""

    def __init__(self, feature: str, path: Path) -> None:
        self.feature = feature
        self.path = Path(path)
        super().__init__(f"{feature} is not available at {self.path}")
