"""センサー状態のスナップショットと再適用

capture() は書き込み可能 (read-write) なサブファンクションの現在値を raw テキストで
保存し、apply_strict() / apply_lossy() で同じ、または互換のセンサーに書き戻す。

  apply_strict : 1 つでも非対応のサブファンクションがあれば何も書かずに失敗
  apply_lossy  : ファイルが存在しないサブファンクションは無視して残りを書く
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from .errors import SubtypeNotSupported
from .subfunction import Access, Subfunction

if TYPE_CHECKING:
    from .sensors import Sensor

logger = logging.getLogger(__name__)

_ORDER = {subfunction: i for i, subfunction in enumerate(Subfunction)}


class SensorState(Mapping):
    """Subfunction -> raw テキスト の読み取り専用マッピング"""

    __slots__ = ("_states",)

    def __init__(self, states: Mapping[Subfunction, str] | None = None) -> None:
        items = dict(states or {})
        for subfunction, raw in items.items():
            if not isinstance(subfunction, Subfunction) or subfunction.access is not Access.READ_WRITE:
                raise ValueError(f"not a read-write subfunction: {subfunction!r}")
            if not isinstance(raw, str):
                raise TypeError(f"raw value for {subfunction.name} must be str, got {type(raw).__name__}")
        self._states = {k: items[k] for k in sorted(items, key=_ORDER.__getitem__)}

    def __getitem__(self, subfunction: Subfunction) -> str:
        return self._states[subfunction]

    def __iter__(self) -> Iterator[Subfunction]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        body = ", ".join(f"{k.name}={v!r}" for k, v in self._states.items())
        return f"SensorState({body})"

    def to_dict(self) -> dict[str, str]:
        """{"max": "80000", ...} 形式に変換する (YAML 出力用)。"""
        return {subfunction.name.lower(): raw for subfunction, raw in self._states.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SensorState:
        """to_dict() の逆変換。キーは enum 名またはファイル接尾辞 ("_max")。"""
        return cls({Subfunction.from_name(str(key)): str(raw) for key, raw in data.items()})


def capture(sensor: Sensor) -> SensorState:
    """sensor の対応する read-write サブファンクションを全て読み取る。"""
    states = {}
    for subfunction in sensor.supported_read_subfunctions():
        if subfunction.access is Access.READ_WRITE:
            states[subfunction] = sensor.read_raw(subfunction)
    logger.debug("captured %d subfunction(s) of %r", len(states), sensor)
    return SensorState(states)


def apply_strict(sensor: Sensor, state: SensorState) -> None:
    """state を書き込む。非対応のサブファンクションを含む場合は何も書かない。

    Raises:
        SubtypeNotSupported: 最初に見つかった非対応のサブファンクション
        NotWritable: sensor が読み取り専用
    """
    supported = set(sensor.supported_write_subfunctions())
    for subfunction in state:
        if subfunction not in supported:
            raise SubtypeNotSupported(subfunction, sensor.subfunction_path(subfunction))
    apply_lossy(sensor, state)


def apply_lossy(sensor: Sensor, state: SensorState) -> None:
    """state を書き込む。ファイルが存在しないサブファンクションは無視する。

    Raises:
        InsufficientRights: 書き込み権限がない
        UnexpectedIo: その他の I/O エラー
        NotWritable: sensor が読み取り専用
    """
    for subfunction, raw in state.items():
        try:
            sensor.write_raw(subfunction, raw)
        except SubtypeNotSupported:
            logger.debug("skip %s: not supported by %r", subfunction.name, sensor)
