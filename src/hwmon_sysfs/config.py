"""hwmon-sysfs 設定 (YAML)

設定例 (/etc/hwmon-sysfs/config.yaml):

  hwmon:
    root: /sys/class/hwmon
    strategy: scan        # scan | sequential
    writable: false
  logging:
    level: INFO

環境変数:
  HWMON_SYSFS_CONFIG  設定ファイルの既定パス
  HWMON_ROOT          hwmon.root を上書き
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .device import ProbeStrategy
from .discovery import HWMON_PATH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.environ.get(
    "HWMON_SYSFS_CONFIG", "/etc/hwmon-sysfs/config.yaml"
)


@dataclass(frozen=True)
class Settings:
    root: str = HWMON_PATH
    strategy: ProbeStrategy = ProbeStrategy.SCAN
    writable: bool = False
    log_level: str = "INFO"


def load_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """設定 YAML を読み込む。

    config_path を省略した場合は DEFAULT_CONFIG_PATH を使い、存在しなければ空の設定を返す。
    明示したパスが存在しない場合は FileNotFoundError。
    """
    explicit = config_path is not None
    path = Path(config_path if explicit else DEFAULT_CONFIG_PATH)
    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {path}")
        logger.debug("no config at %s, using defaults", path)
        return {}
    with path.open() as f:
        return yaml.safe_load(f) or {}


def settings_from_config(config: dict[str, Any]) -> Settings:
    """設定 dict を Settings に変換する。HWMON_ROOT があれば root を上書きする。

    Raises:
        ValueError: strategy が scan / sequential 以外
    """
    hwmon_cfg = config.get("hwmon", {}) or {}
    logging_cfg = config.get("logging", {}) or {}

    root = os.environ.get("HWMON_ROOT", hwmon_cfg.get("root", HWMON_PATH))
    strategy_name = str(hwmon_cfg.get("strategy", ProbeStrategy.SCAN.value)).lower()
    try:
        strategy = ProbeStrategy(strategy_name)
    except ValueError:
        raise ValueError(f"unknown probe strategy: {strategy_name!r}") from None

    return Settings(
        root=str(root),
        strategy=strategy,
        writable=bool(hwmon_cfg.get("writable", False)),
        log_level=str(logging_cfg.get("level", "INFO")).upper(),
    )
