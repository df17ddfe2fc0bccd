"""hwmon センサー

全ての種別 (temp, fan, in, curr, power, energy, humidity, intrusion, pwm) を
1 つの Sensor クラスで表す。種別ごとの違いは capabilities.KIND_CAPABILITIES の
機能テーブルだけで、種別が持たない機能を呼ぶと sysfs に触れずに
CapabilityNotComposed を送出する。

Sensor は (kind, index, device_path) 以外の状態を持たず、全ての操作で
sysfs を読み直す。値のキャッシュはしない。

Usage:
    sensor = Sensor(SensorKind.TEMP, 1, "/sys/class/hwmon/hwmon0")
    sensor.read_input()                      # Temperature
    sensor.read(Capability.MAX)              # Temperature
    writable = Sensor(SensorKind.PWM, 1, path, writable=True)
    writable.write_pwm_enable(PwmEnable.MANUAL_CONTROL)
    writable.write_pwm(Pwm.from_percent(100))
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any, Union

from . import sysfs, units
from .capabilities import Capability, capabilities_of
from .errors import (
    CapabilityNotComposed,
    DisabledSensor,
    FaultySensor,
    InsufficientRights,
    NotWritable,
    SubtypeNotSupported,
)
from .state import SensorState, capture
from .subfunction import SensorKind, Subfunction, subfunction_path

logger = logging.getLogger(__name__)


class Sensor:
    """1 つの hwmon センサー (例: hwmon0 の temp1)。

    Args:
        kind:        センサー種別
        index:       センサー番号 (temp1 なら 1)
        device_path: 所属デバイスのディレクトリ。コピーを保持する。
        writable:    書き込み操作を許可するか
    """

    def __init__(
        self,
        kind: SensorKind,
        index: int,
        device_path: Union[str, Path],
        writable: bool = False,
    ) -> None:
        self._kind = kind
        self._index = index
        self._device_path = Path(device_path)
        self._writable = writable
        self._capabilities = capabilities_of(kind)

    # ------------------------------------------------------------------ #
    # 識別情報
    # ------------------------------------------------------------------ #

    @property
    def kind(self) -> SensorKind:
        return self._kind

    @property
    def index(self) -> int:
        return self._index

    @property
    def device_path(self) -> Path:
        return self._device_path

    @property
    def writable(self) -> bool:
        return self._writable

    @property
    def base(self) -> str:
        """ファイル名の接頭辞 (temp, fan, in, ...)"""
        return self._kind.prefix

    @property
    def capabilities(self) -> frozenset[Capability]:
        return self._capabilities

    def has_capability(self, capability: Capability) -> bool:
        return capability in self._capabilities

    def name(self) -> str:
        """ラベルがあればその内容、なければ "<prefix><index>" を返す。"""
        try:
            return self.read_raw(Subfunction.LABEL)
        except (SubtypeNotSupported, InsufficientRights):
            return f"{self.base}{self._index}"

    def subfunction_path(self, subfunction: Subfunction) -> Path:
        return subfunction_path(self._device_path, self._kind, self._index, subfunction)

    # ------------------------------------------------------------------ #
    # raw アクセス
    # ------------------------------------------------------------------ #

    def read_raw(self, subfunction: Subfunction) -> str:
        """サブファンクションのファイル内容 (前後の空白除去済み) を返す。

        Raises:
            SubtypeNotSupported: ファイルが存在しない
            InsufficientRights: 読み取り権限がない
            UnexpectedIo: その他の I/O エラー
        """
        path = self.subfunction_path(subfunction)
        return sysfs.read_attr(path, lambda: SubtypeNotSupported(subfunction, path))

    def write_raw(self, subfunction: Subfunction, raw: str) -> None:
        """サブファンクションのファイルに raw テキストを書き込む。

        Raises:
            NotWritable: 読み取り専用センサー、または読み取り専用サブファンクション
            SubtypeNotSupported: ファイルが存在しない
            InsufficientRights: 書き込み権限がない
            UnexpectedIo: その他の I/O エラー
        """
        self._require_writable(subfunction)
        path = self.subfunction_path(subfunction)
        sysfs.write_attr(path, raw, lambda: SubtypeNotSupported(subfunction, path))

    def supported_read_subfunctions(self) -> list[Subfunction]:
        """読み取りに成功するサブファンクションの一覧"""
        supported = []
        for subfunction in Subfunction.read_list():
            try:
                self.read_raw(subfunction)
            except (SubtypeNotSupported, InsufficientRights):
                continue
            supported.append(subfunction)
        return supported

    def supported_write_subfunctions(self) -> list[Subfunction]:
        """ファイルが存在し書き込みビットを持つサブファンクションの一覧"""
        if not self._writable:
            raise NotWritable(repr(self))
        return [
            subfunction
            for subfunction in Subfunction.write_list()
            if sysfs.has_write_bits(self.subfunction_path(subfunction))
        ]

    def reset_history(self) -> None:
        """lowest/highest 等の履歴をリセットする。"""
        self.write_raw(Subfunction.RESET_HISTORY, units.bool_to_raw(True))

    # ------------------------------------------------------------------ #
    # 型付きアクセス
    # ------------------------------------------------------------------ #

    def read(self, capability: Capability) -> Any:
        """機能の値を型付きで読む。

        INPUT は事前に故障 (_fault) と無効化 (_enable) を確認する。

        Raises:
            CapabilityNotComposed: 種別がこの機能を持たない
            FaultySensor: INPUT 読み取り時に _fault が 1
            DisabledSensor: INPUT 読み取り時に _enable が 0
            SubtypeNotSupported: ファイルが存在しない
            ConversionError: ファイル内容が値型に変換できない
        """
        self._require_capability(capability)
        if capability is Capability.INPUT:
            self._check_input_usable()
        raw = self.read_raw(capability.subfunction)
        return units.from_raw(capability.value_type_for(self._kind), raw)

    def write(self, capability: Capability, value: Any) -> None:
        """機能の値を書き込む。value の型は機能の値型と一致している必要がある。"""
        self._require_capability(capability)
        if not capability.writable:
            raise NotWritable(f"{capability.name} of {self!r}")
        raw = units.to_raw(capability.value_type_for(self._kind), value)
        self.write_raw(capability.subfunction, raw)

    def state(self) -> SensorState:
        """書き込み可能なサブファンクションの現在値のスナップショット"""
        return capture(self)

    def _check_input_usable(self) -> None:
        if Capability.FAULTY in self._capabilities:
            try:
                faulty = self.read(Capability.FAULTY)
            except SubtypeNotSupported:
                faulty = False
            if faulty:
                raise FaultySensor(self.name())
        if Capability.ENABLE in self._capabilities:
            try:
                enabled = self.read(Capability.ENABLE)
            except SubtypeNotSupported:
                enabled = True
            if not enabled:
                raise DisabledSensor(self.name())

    def _require_capability(self, capability: Capability) -> None:
        if capability not in self._capabilities:
            raise CapabilityNotComposed(self._kind, capability)

    def _require_writable(self, subfunction: Subfunction) -> None:
        if not self._writable:
            raise NotWritable(repr(self))
        if not subfunction.writable:
            raise NotWritable(f"{subfunction.name} of {self!r}")

    # ------------------------------------------------------------------ #
    # read_<capability>() / write_<capability>(value)
    # ------------------------------------------------------------------ #

    def __getattr__(self, attr: str) -> Any:
        operation, _, method_name = attr.partition("_")
        if operation in ("read", "write") and method_name:
            try:
                capability = Capability.from_method_name(method_name)
            except KeyError:
                pass
            else:
                if operation == "read":
                    return functools.partial(self.read, capability)
                return functools.partial(self.write, capability)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {attr!r}")

    def __dir__(self) -> list[str]:
        names = set(super().__dir__())
        for capability in self._capabilities:
            names.add(f"read_{capability.method_name}")
            if capability.writable:
                names.add(f"write_{capability.method_name}")
        return sorted(names)

    # ------------------------------------------------------------------ #
    # 比較 / 表示
    # ------------------------------------------------------------------ #

    def _key(self) -> tuple[Path, SensorKind, int]:
        return (self._device_path, self._kind, self._index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        mode = "rw" if self._writable else "ro"
        return f"Sensor({self.base}{self._index} @ {self._device_path}, {mode})"
