"""ラスター画像アダプタのテスト"""

import numpy as np
import pytest
from PySide6.QtGui import QColor, QImage, QPixmap

from collage import InvalidArgumentError, image_size, to_qimage


@pytest.mark.parametrize("shape, expected", [
    ((4, 6), (6, 4)),
    ((4, 6, 1), (6, 4)),
    ((5, 2, 3), (2, 5)),
    ((1, 1, 4), (1, 1)),
])
def test_image_size_for_arrays(shape, expected):
    assert image_size(np.zeros(shape, dtype=np.uint8)) == expected


def test_image_size_for_qimage():
    assert image_size(QImage(7, 3, QImage.Format.Format_ARGB32)) == (7, 3)


@pytest.mark.parametrize("shape", [(0, 5), (5, 0), (0, 0, 3), (10, 0, 4)])
def test_zero_dimensions_rejected(shape):
    with pytest.raises(InvalidArgumentError):
        image_size(np.zeros(shape, dtype=np.uint8))


def test_null_qimage_rejected():
    with pytest.raises(InvalidArgumentError):
        image_size(QImage())


def test_wrong_dtype_rejected():
    with pytest.raises(InvalidArgumentError, match="dtype"):
        image_size(np.zeros((4, 4, 3), dtype=np.float32))


def test_wrong_channel_count_rejected():
    with pytest.raises(InvalidArgumentError):
        image_size(np.zeros((4, 4, 2), dtype=np.uint8))


def test_wrong_ndim_rejected():
    with pytest.raises(InvalidArgumentError):
        image_size(np.zeros((2, 2, 3, 1), dtype=np.uint8))
    with pytest.raises(InvalidArgumentError):
        image_size(np.zeros(16, dtype=np.uint8))


def test_unsupported_type_rejected():
    with pytest.raises(InvalidArgumentError):
        image_size([[0, 0], [0, 0]])
    with pytest.raises(InvalidArgumentError):
        to_qimage(b"\x00\x00\x00")


def test_rgb_conversion_with_unaligned_stride():
    """行バイト数が4の倍数でないRGB画像も正しく変換されること"""
    image = np.zeros((2, 3, 3), dtype=np.uint8)
    image[1, 2] = (10, 200, 30)

    qimage = to_qimage(image)

    assert qimage.format() == QImage.Format.Format_RGB888
    assert (qimage.width(), qimage.height()) == (3, 2)
    assert qimage.pixelColor(2, 1) == QColor(10, 200, 30)
    assert qimage.pixelColor(0, 0) == QColor(0, 0, 0)


def test_grayscale_conversion():
    image = np.arange(6, dtype=np.uint8).reshape(2, 3, 1) * 40
    qimage = to_qimage(image)

    assert qimage.format() == QImage.Format.Format_Grayscale8
    assert qimage.pixelColor(2, 1).red() == 200


def test_rgba_conversion_keeps_alpha():
    image = np.zeros((1, 2, 4), dtype=np.uint8)
    image[0, 1] = (255, 255, 0, 128)
    qimage = to_qimage(image)

    assert qimage.format() == QImage.Format.Format_RGBA8888
    assert qimage.pixelColor(1, 0).alpha() == 128


def test_non_contiguous_array():
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    image[:, :, 0] = 255
    view = image[::2, ::2]
    assert not view.flags["C_CONTIGUOUS"]

    qimage = to_qimage(view)
    assert (qimage.width(), qimage.height()) == (2, 2)
    assert qimage.pixelColor(1, 1) == QColor(255, 0, 0)


def test_conversion_detaches_from_array():
    """変換結果は元の配列とバッファを共有しないこと"""
    image = np.full((2, 2, 3), 255, dtype=np.uint8)
    qimage = to_qimage(image)
    image[:] = 0
    assert qimage.pixelColor(0, 0) == QColor(255, 255, 255)


def test_conversion_does_not_mutate_input():
    image = np.random.default_rng(0).integers(0, 256, (5, 7, 3), dtype=np.uint8)
    before = image.copy()
    to_qimage(image)
    np.testing.assert_array_equal(image, before)


def test_qimage_is_copied():
    source = QImage(2, 2, QImage.Format.Format_RGB32)
    source.fill(QColor(1, 2, 3))
    copied = to_qimage(source)
    source.fill(QColor(9, 9, 9))
    assert copied.pixelColor(0, 0) == QColor(1, 2, 3)


def test_qpixmap_conversion(qapp):
    pixmap = QPixmap(4, 3)
    pixmap.fill(QColor(0, 128, 0))
    qimage = to_qimage(pixmap)
    assert (qimage.width(), qimage.height()) == (4, 3)
    assert qimage.pixelColor(3, 2) == QColor(0, 128, 0)
