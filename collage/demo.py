"""
collageデモ

合成したテスト画像を create_image_window() で表示し、
すべてのウィンドウが閉じられるまでイベントループを回す
"""

import argparse
import sys
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PySide6.QtCore import QEventLoop

from logutils import setup_logging, log_print, DEBUG, INFO, ERROR
from . import config
from .application import ensure_application
from .errors import CollageError, InvalidArgumentError
from .frame import ImageWindowHandle, create_image_window


def make_pattern(pattern: str, width: int, height: int) -> np.ndarray:
    """
    テスト用のRGB画像を生成する

    Args:
        pattern: "gradient", "checker", "solid" のいずれか
        width: 幅
        height: 高さ

    Returns:
        (height, width, 3) のuint8配列

    Raises:
        InvalidArgumentError: サイズが0以下、または不明なパターンの場合
    """
    if width <= 0 or height <= 0:
        raise InvalidArgumentError(f"画像サイズが不正です: {width}x{height}")

    if pattern == "gradient":
        xs = np.linspace(0, 255, width, dtype=np.float32)
        ys = np.linspace(0, 255, height, dtype=np.float32)
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[:, :, 0] = xs[np.newaxis, :]
        image[:, :, 1] = ys[:, np.newaxis]
        image[:, :, 2] = 128
        return image
    if pattern == "checker":
        cell = 16
        yy, xx = np.mgrid[0:height, 0:width]
        mask = ((yy // cell) + (xx // cell)) % 2 == 0
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[mask] = 255
        return image
    if pattern == "solid":
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[:, :, 0] = 255
        return image
    raise InvalidArgumentError(f"不明なパターンです: {pattern}")


def parse_size(text: str) -> Tuple[int, int]:
    """'WxH'形式の文字列をサイズに変換する"""
    try:
        width, height = (int(v) for v in text.lower().split("x", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"サイズは WxH の形式で指定してください: {text}")
    return width, height


def wait_until_closed(handles: Sequence[ImageWindowHandle]) -> None:
    """すべてのウィンドウが閉じられるまでイベントループを回す"""
    loop = QEventLoop()
    remaining = [h for h in handles if h.is_shown]
    if not remaining:
        return

    def _disposed(handle):
        if all(h.is_disposed for h in remaining):
            loop.quit()

    for handle in remaining:
        handle.on_disposed(_disposed)
    loop.exec()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="collage - 画像ウィンドウのデモ")
    parser.add_argument("--title", default=config.DEMO_TITLE, help="ウィンドウタイトル")
    parser.add_argument("--size", type=parse_size, default=config.DEMO_SIZE, help="画像サイズ（WxH）")
    parser.add_argument("--count", type=int, default=1, help="開くウィンドウの数")
    parser.add_argument("--pattern", choices=config.DEMO_PATTERNS, default=config.DEMO_PATTERN,
                        help="テスト画像のパターン")
    parser.add_argument("--debug", action="store_true", help="デバッグモードで起動")
    return parser


def main(argv: Optional[List[str]] = None, wait: bool = True) -> int:
    """メイン関数"""
    args = build_parser().parse_args(argv)

    setup_logging(DEBUG if args.debug else ERROR)
    if args.debug:
        log_print(INFO, "デバッグモードが有効化されました")

    width, height = args.size
    handles = []
    try:
        ensure_application()
        image = make_pattern(args.pattern, width, height)
        for i in range(max(args.count, 1)):
            title = args.title if args.count <= 1 else f"{args.title} ({i + 1})"
            handles.append(create_image_window(title, image))
    except CollageError as e:
        log_print(ERROR, f"ウィンドウを表示できませんでした: {e}")
        return 1

    log_print(INFO, f"{len(handles)}個のウィンドウを表示しました")
    if wait:
        wait_until_closed(handles)
    return 0


if __name__ == "__main__":
    sys.exit(main())
