"""hwmon デバイス (/sys/class/hwmon/hwmon<N>) とセンサー探索

デバイスディレクトリの構成:

  name               必須。デバイス名 (例: "coretemp")
  update_interval    任意。更新間隔 (ms)
  beep_enable        任意。ビープ全体の有効/無効 ("0"/"1")
  device             任意。実デバイスへのシンボリックリンク
  <prefix><index>_*  センサーのサブファンクション

センサーの存在はプライマリファイル (temp1_input, pwm1, intrusion0_alarm, ...)
の有無で判定する。探索方法は ProbeStrategy で選ぶ:

  SCAN        ディレクトリ一覧から最大番号を求め、first..max を全て確認する。
              番号が飛んでいても (temp1, temp2, temp4) 取りこぼさない。
  SEQUENTIAL  first から順に確認し、最初に存在しない番号で打ち切る。
"""

from __future__ import annotations

import enum
import logging
import os
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Union

from . import sysfs, units
from .errors import (
    DeviceDirError,
    DeviceNameError,
    FeatureNotAvailable,
    InsufficientRights,
    NotWritable,
    SensorProbeError,
    UnexpectedIo,
)
from .sensors import Sensor
from .subfunction import SensorKind, subfunction_path

logger = logging.getLogger(__name__)

# センサー番号の上限 (u16)
MAX_SENSOR_INDEX = 65535


class ProbeStrategy(enum.Enum):
    SCAN = "scan"
    SEQUENTIAL = "sequential"


# ------------------------------------------------------------------ #
# センサー探索
# ------------------------------------------------------------------ #

def _primary_exists(device_path: Path, kind: SensorKind, index: int) -> bool:
    path = subfunction_path(device_path, kind, index, kind.primary)
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except PermissionError as e:
        raise InsufficientRights(path) from e
    except OSError as e:
        raise SensorProbeError(kind, index, path) from e
    return True


def _listed_indices(entries: list[str], kind: SensorKind) -> set[int]:
    pattern = re.compile(rf"{re.escape(kind.prefix)}(\d+)(?:_|$)")
    indices = set()
    for entry in entries:
        m = pattern.match(entry)
        if not m:
            continue
        index = int(m.group(1))
        if index > MAX_SENSOR_INDEX:
            logger.debug("ignore %s: index out of range", entry)
            continue
        indices.add(index)
    return indices


def scan_sensors(
    device_path: Path,
    entries: list[str],
    kind: SensorKind,
    strategy: ProbeStrategy = ProbeStrategy.SCAN,
    writable: bool = False,
) -> dict[int, Sensor]:
    """device_path にある kind のセンサーを探索する。

    Args:
        device_path: デバイスディレクトリ
        entries:     device_path のエントリ名一覧 (SCAN で使用)
        kind:        センサー種別
        strategy:    探索方法
        writable:    生成する Sensor の書き込み許可

    Returns:
        センサー番号 -> Sensor (番号昇順)

    Raises:
        InsufficientRights: プライマリファイルの確認で権限不足
        SensorProbeError: プライマリファイルの確認でその他のエラー
    """
    found: dict[int, Sensor] = {}
    if strategy is ProbeStrategy.SEQUENTIAL:
        index = kind.first_index
        while index <= MAX_SENSOR_INDEX and _primary_exists(device_path, kind, index):
            found[index] = Sensor(kind, index, device_path, writable)
            index += 1
        return found

    listed = _listed_indices(entries, kind)
    if not listed:
        return found
    for index in range(kind.first_index, max(listed) + 1):
        if _primary_exists(device_path, kind, index):
            found[index] = Sensor(kind, index, device_path, writable)
    return found


def _list_dir(path: Path) -> list[str]:
    try:
        return sorted(os.listdir(path))
    except PermissionError as e:
        raise InsufficientRights(path) from e
    except OSError as e:
        raise DeviceDirError(path) from e


def _read_name(path: Path) -> str:
    name_path = path / "name"
    try:
        return name_path.read_text().strip()
    except OSError as e:
        raise DeviceNameError(name_path) from e


# ------------------------------------------------------------------ #
# Device
# ------------------------------------------------------------------ #

class Device:
    """1 つの hwmon デバイス。

    センサーの表は生成時に一度だけ作られ、以後変更されない。
    同値性はファイルシステム上のパスのみで決まる。
    """

    def __init__(
        self,
        path: Union[str, Path],
        index: int,
        name: str,
        sensors: Mapping[SensorKind, Mapping[int, Sensor]],
        writable: bool = False,
    ) -> None:
        self._path = Path(path)
        self._index = index
        self._name = name
        self._writable = writable
        self._sensors = MappingProxyType({
            kind: MappingProxyType(dict(sorted(sensors.get(kind, {}).items())))
            for kind in SensorKind
        })

    @classmethod
    def parse(
        cls,
        path: Union[str, Path],
        index: int,
        writable: bool = False,
        strategy: ProbeStrategy = ProbeStrategy.SCAN,
    ) -> Device:
        """デバイスディレクトリを解析して Device を生成する。

        Raises:
            InsufficientRights: ディレクトリやファイルの権限不足
            DeviceDirError: ディレクトリを列挙できない
            DeviceNameError: name ファイルが読めない
            SensorProbeError: センサーの確認に失敗
        """
        path = Path(path)
        entries = _list_dir(path)
        name = _read_name(path)
        sensors = {
            kind: scan_sensors(path, entries, kind, strategy, writable)
            for kind in SensorKind
        }
        logger.debug(
            "hwmon%d (%s): %s", index, name,
            ", ".join(f"{kind.prefix}={sorted(found)}" for kind, found in sensors.items() if found) or "no sensors",
        )
        return cls(path, index, name, sensors, writable)

    # ------------------------------------------------------------------ #
    # 基本情報
    # ------------------------------------------------------------------ #

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        return self._path

    @property
    def index(self) -> int:
        return self._index

    @property
    def writable(self) -> bool:
        return self._writable

    # ------------------------------------------------------------------ #
    # センサー
    # ------------------------------------------------------------------ #

    def sensors(self, kind: SensorKind) -> Mapping[int, Sensor]:
        return self._sensors[kind]

    def sensor(self, kind: SensorKind, index: int) -> Optional[Sensor]:
        return self._sensors[kind].get(index)

    def all_sensors(self) -> Iterator[Sensor]:
        """全センサーを種別順・番号順に返す。種別は Sensor.kind で判別する。"""
        for kind in SensorKind:
            yield from self._sensors[kind].values()

    def currents(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.CURRENT]

    def energies(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.ENERGY]

    def fans(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.FAN]

    def humidities(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.HUMIDITY]

    def intrusions(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.INTRUSION]

    def powers(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.POWER]

    def pwms(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.PWM]

    def temps(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.TEMP]

    def voltages(self) -> Mapping[int, Sensor]:
        return self._sensors[SensorKind.VOLTAGE]

    def temp(self, index: int) -> Optional[Sensor]:
        return self.sensor(SensorKind.TEMP, index)

    def fan(self, index: int) -> Optional[Sensor]:
        return self.sensor(SensorKind.FAN, index)

    def pwm(self, index: int) -> Optional[Sensor]:
        return self.sensor(SensorKind.PWM, index)

    def voltage(self, index: int) -> Optional[Sensor]:
        return self.sensor(SensorKind.VOLTAGE, index)

    # ------------------------------------------------------------------ #
    # 任意属性 (呼び出しごとに読み直す)
    # ------------------------------------------------------------------ #

    def update_interval(self) -> units.Duration:
        """update_interval の値

        Raises:
            FeatureNotAvailable: ファイルが存在しない
        """
        path = self._path / "update_interval"
        raw = sysfs.read_attr(path, lambda: FeatureNotAvailable("update_interval", path))
        return units.Duration.from_raw(raw)

    def set_update_interval(self, interval: units.Duration) -> None:
        self._require_writable()
        path = self._path / "update_interval"
        sysfs.write_attr(path, interval.to_raw(), lambda: FeatureNotAvailable("update_interval", path))

    def beep_enable(self) -> bool:
        path = self._path / "beep_enable"
        raw = sysfs.read_attr(path, lambda: FeatureNotAvailable("beep_enable", path))
        return units.bool_from_raw(raw)

    def set_beep_enable(self, enabled: bool) -> None:
        self._require_writable()
        path = self._path / "beep_enable"
        sysfs.write_attr(path, units.bool_to_raw(enabled), lambda: FeatureNotAvailable("beep_enable", path))

    def device_path(self) -> Path:
        """device リンクの解決先 (安定したデバイスパス)"""
        link = self._path / "device"
        try:
            return link.resolve(strict=True)
        except FileNotFoundError:
            raise FeatureNotAvailable("device", link) from None
        except PermissionError as e:
            raise InsufficientRights(link) from e
        except OSError as e:
            raise UnexpectedIo(link, "resolving") from e

    def _require_writable(self) -> None:
        if not self._writable:
            raise NotWritable(repr(self))

    # ------------------------------------------------------------------ #
    # 比較 / 表示
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"Device(hwmon{self._index} {self._name!r} @ {self._path})"
