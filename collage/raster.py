"""
ラスター画像アダプタ

呼び出し元が保持しているラスター画像（NumPy配列/QImage/QPixmap）を検証し、
ウィンドウが所有するQImageに変換する
"""

from typing import Any, Tuple, Union

import numpy as np
from PySide6.QtGui import QImage, QPixmap

from logutils import log_print, DEBUG
from .errors import InvalidArgumentError

RasterImage = Union[np.ndarray, QImage, QPixmap]

# チャンネル数とQImageフォーマットの対応
_CHANNEL_FORMATS = {
    1: QImage.Format.Format_Grayscale8,
    3: QImage.Format.Format_RGB888,
    4: QImage.Format.Format_RGBA8888,
}


def _array_channels(array: np.ndarray) -> int:
    """NumPy配列のチャンネル数を検証して返す"""
    if array.dtype != np.uint8:
        raise InvalidArgumentError(f"サポートされていないdtypeです: {array.dtype}（uint8のみ対応）")
    if array.ndim == 2:
        return 1
    if array.ndim == 3:
        channels = array.shape[2]
        if channels in _CHANNEL_FORMATS:
            return channels
        raise InvalidArgumentError(f"サポートされていないチャンネル数: {channels}")
    raise InvalidArgumentError(f"画像配列の次元数が不正です: shape={array.shape}")


def image_size(image: Any) -> Tuple[int, int]:
    """
    ラスター画像のサイズを検証して返す

    Args:
        image: NumPy配列（HxW, HxWx1, HxWx3, HxWx4のuint8）、QImage、QPixmap

    Returns:
        (幅, 高さ) のタプル

    Raises:
        InvalidArgumentError: 未対応の型、またはサイズが0以下の場合
    """
    if isinstance(image, np.ndarray):
        _array_channels(image)
        height, width = image.shape[:2]
    elif isinstance(image, (QImage, QPixmap)):
        width, height = image.width(), image.height()
    else:
        raise InvalidArgumentError(f"サポートされていない画像の型です: {type(image).__name__}")

    if width <= 0 or height <= 0:
        raise InvalidArgumentError(f"画像サイズが不正です: {width}x{height}")
    return int(width), int(height)


def to_qimage(image: RasterImage) -> QImage:
    """
    ラスター画像をウィンドウ所有のQImageに変換する

    元の画像バッファとは共有しないコピーを返すので、
    呼び出し後に元の配列を書き換えても表示には影響しない。

    Args:
        image: image_size() が受け付ける画像

    Returns:
        ピクセルデータを複製したQImage

    Raises:
        InvalidArgumentError: 画像が不正な場合
    """
    width, height = image_size(image)

    if isinstance(image, QPixmap):
        return image.toImage()
    if isinstance(image, QImage):
        return image.copy()

    channels = _array_channels(image)
    array = image
    if array.ndim == 3 and channels == 1:
        array = array[:, :, 0]
    array = np.ascontiguousarray(array)

    # 行ストライドは配列から取る（QImageの4バイト境界を仮定しない）
    qimage = QImage(array.data, width, height, array.strides[0], _CHANNEL_FORMATS[channels])
    log_print(DEBUG, f"QImage作成: {width}x{height}, チャンネル数: {channels}")
    return qimage.copy()
