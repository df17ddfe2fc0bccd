"""sysfs 属性ファイルの読み書き

hwmon の全ファイル I/O はここを通る。OSError は次のように変換する:

  FileNotFoundError  -> 呼び出し側が指定する例外 (missing)
  PermissionError    -> InsufficientRights
  その他の OSError    -> UnexpectedIo (元の例外を __cause__ に連鎖)
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Callable

from .errors import HwmonError, InsufficientRights, UnexpectedIo

logger = logging.getLogger(__name__)

MissingFactory = Callable[[], HwmonError]

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


def read_attr(path: Path, missing: MissingFactory) -> str:
    """属性ファイルを読み、前後の空白を除いた内容を返す。

    Raises:
        HwmonError: missing() の戻り値 (ファイルが存在しない場合)
        InsufficientRights: 読み取り権限がない場合
        UnexpectedIo: その他の I/O エラー
    """
    try:
        return Path(path).read_text().strip()
    except FileNotFoundError:
        raise missing() from None
    except PermissionError as e:
        raise InsufficientRights(path) from e
    except OSError as e:
        raise UnexpectedIo(path, "reading") from e


def write_attr(path: Path, raw: str, missing: MissingFactory) -> None:
    """属性ファイルに raw テキストを書き込む。例外は read_attr と同じ。

    存在しないファイルは作成しない (O_CREAT なし)。
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_TRUNC)
        with os.fdopen(fd, "w") as f:
            f.write(raw)
    except FileNotFoundError:
        raise missing() from None
    except PermissionError as e:
        raise InsufficientRights(path) from e
    except OSError as e:
        raise UnexpectedIo(path, "writing") from e
    logger.debug("wrote %r to %s", raw, path)


def has_write_bits(path: Path) -> bool:
    """ファイルが存在し、いずれかの書き込みビットを持つか。

    実効ユーザーではなくモードビットを見るため root でも 0444 のファイルは False。
    """
    try:
        mode = os.stat(path).st_mode
    except (FileNotFoundError, NotADirectoryError, PermissionError):
        return False
    except OSError as e:
        raise UnexpectedIo(path, "inspecting") from e
    return stat.S_ISREG(mode) and bool(mode & _WRITE_BITS)
