"""hwmon-sysfs: hwmon センサー一覧・状態ダンプ・PWM 全開 CLI

サブコマンド:
  list         全デバイスと全センサーの現在値を表示 (既定)
  state        1 センサーの書き込み可能な設定値を YAML で表示
  pwms-to-max  全 PWM を手動制御 100% にする (要書き込み権限)
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import yaml

from .capabilities import Capability
from .config import DEFAULT_CONFIG_PATH, load_config, settings_from_config
from .device import ProbeStrategy
from .discovery import Hwmons
from .errors import HwmonError
from .sensors import Sensor
from .subfunction import SensorKind
from .units import Pwm, PwmEnable

logger = logging.getLogger(__name__)


def primary_capability(sensor: Sensor) -> Capability:
    """一覧表示で読む機能 (pwm はデューティ、intrusion はアラーム)"""
    if sensor.kind is SensorKind.PWM:
        return Capability.PWM
    if sensor.kind is SensorKind.INTRUSION:
        return Capability.ALARM
    return Capability.INPUT


# ------------------------------------------------------------------ #
# サブコマンド
# ------------------------------------------------------------------ #

def cmd_list(hwmons: Hwmons) -> int:
    for index, name, device in hwmons:
        print(f"hwmon{index} ({name}):")
        for sensor in device.all_sensors():
            try:
                value = str(sensor.read(primary_capability(sensor)))
            except HwmonError as e:
                logger.warning("%s/%s: %s", name, sensor.name(), e)
                value = "n/a"
            print(f"\t{sensor.name()}: {value}")
    return 0


def cmd_state(hwmons: Hwmons, kind: SensorKind, index: int, device_index: Optional[int]) -> int:
    devices = hwmons.devices() if device_index is None else [hwmons.hwmon_by_index(device_index)]
    for device in devices:
        if device is None:
            continue
        sensor = device.sensor(kind, index)
        if sensor is None:
            continue
        state = sensor.state()
        print(f"# hwmon{device.index} ({device.name}) {sensor.name()}")
        print(yaml.safe_dump(state.to_dict(), default_flow_style=False, sort_keys=False), end="")
        return 0
    logger.error("sensor %s%d not found", kind.prefix, index)
    return 1


def cmd_pwms_to_max(hwmons: Hwmons) -> int:
    full = Pwm.from_percent(100)
    count = 0
    for _, name, device in hwmons:
        for sensor in device.pwms().values():
            sensor.write(Capability.PWM_ENABLE, PwmEnable.MANUAL_CONTROL)
            sensor.write(Capability.PWM, full)
            logger.info("%s/%s -> %s", name, sensor.name(), full)
            count += 1
    logger.info("set %d pwm(s) to max", count)
    return 0


# ------------------------------------------------------------------ #
# エントリポイント
# ------------------------------------------------------------------ #

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hwmon-sysfs",
        description="hwmon-sysfs: Linux hwmon sensor discovery",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to config YAML file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--root", default=None, help="hwmon root directory")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ProbeStrategy],
        default=None,
        help="Sensor probing strategy",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("list", help="List devices and sensor readings")
    state = sub.add_parser("state", help="Dump the writable state of one sensor as YAML")
    state.add_argument("kind", help="Sensor kind or file prefix (temp, fan, in, pwm, ...)")
    state.add_argument("index", type=int, help="Sensor index")
    state.add_argument("--device", type=int, default=None, help="hwmon device index")
    sub.add_parser("pwms-to-max", help="Set every pwm to manual control at 100%%")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_config(load_config(args.config))
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        logging.basicConfig(format="%(asctime)s %(name)-20s %(levelname)-8s %(message)s", stream=sys.stderr)
        logger.error("設定ファイル読み込みエラー: %s", e)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.debug else getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(name)-20s %(levelname)-8s %(message)s",
        stream=sys.stderr,
    )

    root = args.root or settings.root
    strategy = ProbeStrategy(args.strategy) if args.strategy else settings.strategy
    command = args.command or "list"
    writable = command == "pwms-to-max" or settings.writable

    try:
        hwmons = Hwmons.parse(root, writable=writable, strategy=strategy)
    except HwmonError as e:
        logger.error("discovery failed: %s", e)
        return 1

    try:
        if command == "state":
            try:
                kind = SensorKind.from_name(args.kind)
            except KeyError:
                parser.error(f"unknown sensor kind: {args.kind}")
            return cmd_state(hwmons, kind, args.index, args.device)
        if command == "pwms-to-max":
            return cmd_pwms_to_max(hwmons)
        return cmd_list(hwmons)
    except HwmonError as e:
        logger.error("%s failed: %s", command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
