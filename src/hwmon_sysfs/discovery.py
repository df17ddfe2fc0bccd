"""hwmon ディスカバリ

ルート (既定 /sys/class/hwmon) 直下の hwmon<N> ディレクトリを全て解析して
Hwmons を返す。部分的な成功はなく、最初のエラーで全体が失敗する。

  RootScan   : ルートの存在・ディレクトリ確認と一覧
  DeviceScan : hwmon<N> ごとに name を読み、ディレクトリを一覧
  SensorScan : 種別ごとにプライマリファイルの有無を確認 (device.scan_sensors)
"""

from __future__ import annotations

import logging
import os
import re
import stat
from collections.abc import Iterator
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Union

from .device import Device, ProbeStrategy
from .errors import FeatureNotAvailable, InsufficientRights, PathInvalid, PathMissing, UnexpectedIo

logger = logging.getLogger(__name__)

HWMON_PATH = "/sys/class/hwmon"

# 先頭ゼロ付き (hwmon01) は hwmon1 と番号が衝突するので対象外
_DEVICE_DIR_RE = re.compile(r"hwmon(0|[1-9][0-9]*)")


def check_root(path: Path) -> None:
    """ルートパスが存在するディレクトリであることを確認する。

    Raises:
        PathMissing: 存在しない
        PathInvalid: ディレクトリではない
        InsufficientRights: 確認する権限がない
    """
    try:
        mode = os.stat(path).st_mode
    except FileNotFoundError:
        raise PathMissing(path) from None
    except PermissionError as e:
        raise InsufficientRights(path) from e
    except NotADirectoryError:
        raise PathInvalid(path) from None
    except OSError as e:
        raise UnexpectedIo(path, "inspecting") from e
    if not stat.S_ISDIR(mode):
        raise PathInvalid(path)


def list_device_dirs(path: Path) -> list[tuple[int, Path]]:
    """ルート直下の hwmon<N> ディレクトリを (N, path) の番号昇順で返す。

    名前が合わないエントリとディレクトリでないエントリは無視する。
    """
    try:
        entries = os.listdir(path)
    except PermissionError as e:
        raise InsufficientRights(path) from e
    except OSError as e:
        raise UnexpectedIo(path, "listing") from e

    found = []
    for entry in entries:
        m = _DEVICE_DIR_RE.fullmatch(entry)
        if not m:
            logger.debug("ignore %s: not a hwmon entry", entry)
            continue
        device_path = path / entry
        if not device_path.is_dir():
            logger.debug("ignore %s: not a directory", entry)
            continue
        found.append((int(m.group(1)), device_path))
    found.sort()
    return found


class Hwmons:
    """ディスカバリ結果。番号 -> Device の順序付きマッピング。

    Usage:
        hwmons = Hwmons.parse()
        for index, name, device in hwmons:
            for sensor in device.temps().values():
                print(name, sensor.name(), sensor.read_input())
    """

    def __init__(self, path: Union[str, Path], devices: dict[int, Device]) -> None:
        self._path = Path(path)
        self._devices = MappingProxyType(dict(sorted(devices.items())))

    @classmethod
    def parse(
        cls,
        path: Union[str, Path] = HWMON_PATH,
        writable: bool = False,
        strategy: ProbeStrategy = ProbeStrategy.SCAN,
    ) -> Hwmons:
        """path を解析する。

        Raises:
            ParsingError: ルート・デバイス・センサーの解析に失敗
            InsufficientRights: 権限不足
        """
        root = Path(path)
        check_root(root)
        devices = {}
        for index, device_path in list_device_dirs(root):
            devices[index] = Device.parse(device_path, index, writable=writable, strategy=strategy)
        logger.info("discovered %d hwmon device(s) in %s", len(devices), root)
        return cls(root, devices)

    @property
    def path(self) -> Path:
        return self._path

    def __iter__(self) -> Iterator[tuple[int, str, Device]]:
        for index, device in self._devices.items():
            yield index, device.name, device

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, index: object) -> bool:
        return index in self._devices

    def devices(self) -> list[Device]:
        return list(self._devices.values())

    def hwmon_by_index(self, index: int) -> Optional[Device]:
        return self._devices.get(index)

    def hwmons_by_name(self, name: str) -> list[Device]:
        return [device for device in self._devices.values() if device.name == name]

    def hwmon_by_device_path(self, device_path: Union[str, Path]) -> Optional[Device]:
        """device リンクの解決先が device_path と一致するデバイス"""
        target = Path(device_path).resolve()
        for device in self._devices.values():
            try:
                if device.device_path() == target:
                    return device
            except FeatureNotAvailable:
                continue
        return None

    def __repr__(self) -> str:
        return f"Hwmons({self._path}, {len(self._devices)} device(s))"


def discover(
    path: Union[str, Path] = HWMON_PATH,
    writable: bool = False,
    strategy: ProbeStrategy = ProbeStrategy.SCAN,
) -> Hwmons:
    """Hwmons.parse() の関数版"""
    return Hwmons.parse(path, writable=writable, strategy=strategy)


def parse_hwmons_read_only(path: Union[str, Path] = HWMON_PATH) -> Hwmons:
    return Hwmons.parse(path, writable=False)


def parse_hwmons_read_write(path: Union[str, Path] = HWMON_PATH) -> Hwmons:
    return Hwmons.parse(path, writable=True)
