"""ディスカバリとセンサーアクセスの asyncio 版

ブロッキングする sysfs I/O はイベントループのデフォルト executor
(loop.run_in_executor(None, ...)) で実行する。デバイスは並行して解析し、
全デバイスの解析が終わってから結果を返す。失敗・キャンセル時は何も返さない。
"""

from __future__ import annotations

import asyncio
import functools
import logging
from pathlib import Path
from typing import Any, Union

from .capabilities import Capability
from .device import Device, ProbeStrategy
from .discovery import HWMON_PATH, Hwmons, check_root, list_device_dirs
from .sensors import Sensor
from .state import SensorState, apply_lossy, apply_strict
from .subfunction import Subfunction

logger = logging.getLogger(__name__)


async def _in_executor(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


async def discover_async(
    path: Union[str, Path] = HWMON_PATH,
    writable: bool = False,
    strategy: ProbeStrategy = ProbeStrategy.SCAN,
) -> Hwmons:
    """discovery.discover の非同期版。

    いずれかのデバイスでエラーが起きた場合、残りのタスクをキャンセルしてから
    最初のエラーを送出する。
    """
    root = Path(path)
    await _in_executor(check_root, root)
    entries = await _in_executor(list_device_dirs, root)

    tasks = [
        asyncio.ensure_future(
            _in_executor(Device.parse, device_path, index, writable=writable, strategy=strategy)
        )
        for index, device_path in entries
    ]
    try:
        devices = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    logger.info("discovered %d hwmon device(s) in %s", len(devices), root)
    return Hwmons(root, {device.index: device for device in devices})


class AsyncSensor:
    """Sensor を await で使うためのラッパー。

    各メソッドは同期版と同じ動作で、ファイルアクセスの間だけ処理を譲る。
    """

    def __init__(self, sensor: Sensor) -> None:
        self._sensor = sensor

    @property
    def sensor(self) -> Sensor:
        return self._sensor

    @property
    def kind(self):
        return self._sensor.kind

    @property
    def index(self) -> int:
        return self._sensor.index

    async def name(self) -> str:
        return await _in_executor(self._sensor.name)

    async def read_raw(self, subfunction: Subfunction) -> str:
        return await _in_executor(self._sensor.read_raw, subfunction)

    async def write_raw(self, subfunction: Subfunction, raw: str) -> None:
        await _in_executor(self._sensor.write_raw, subfunction, raw)

    async def read(self, capability: Capability) -> Any:
        return await _in_executor(self._sensor.read, capability)

    async def write(self, capability: Capability, value: Any) -> None:
        await _in_executor(self._sensor.write, capability, value)

    async def read_input(self) -> Any:
        return await self.read(Capability.INPUT)

    async def supported_read_subfunctions(self) -> list[Subfunction]:
        return await _in_executor(self._sensor.supported_read_subfunctions)

    async def supported_write_subfunctions(self) -> list[Subfunction]:
        return await _in_executor(self._sensor.supported_write_subfunctions)

    async def reset_history(self) -> None:
        await _in_executor(self._sensor.reset_history)

    async def state(self) -> SensorState:
        return await _in_executor(self._sensor.state)

    async def apply_strict(self, state: SensorState) -> None:
        await _in_executor(apply_strict, self._sensor, state)

    async def apply_lossy(self, state: SensorState) -> None:
        await _in_executor(apply_lossy, self._sensor, state)

    def __repr__(self) -> str:
        return f"AsyncSensor({self._sensor!r})"
