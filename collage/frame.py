"""
画像ウィンドウ

メモリ上のラスター画像を1枚だけ表示するトップレベルウィンドウを作成する
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QCloseEvent, QImage, QPixmap
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from logutils import log_print, DEBUG, WARNING
from .application import ensure_application, run_on_ui_thread
from .errors import CollageError, InvalidArgumentError
from .raster import image_size, to_qimage


class WindowState(Enum):
    """ウィンドウの状態（表示中 → 破棄済み）"""
    SHOWN = "shown"
    DISPOSED = "disposed"


def _escape_title(title: str) -> str:
    # Qtはタイトル中の"[*]"を変更マーカーとして扱うので"[*][*]"でそのまま表示させる
    return title.replace("[*]", "[*][*]")


class ImageFrame(QWidget):
    """
    画像を原寸で表示するトップレベルウィンドウ

    子ウィジェットは画像表示用のQLabel 1つだけ。
    閉じるとウィンドウ自身が破棄されるが、アプリケーションは終了しない。

    シグナル:
        closed: ウィンドウが閉じられたときに発行
    """
    closed = Signal()

    def __init__(self, title: str, image: QImage):
        """
        初期化

        Args:
            title: ウィンドウタイトル
            image: 表示する画像
        """
        super().__init__(None)
        self.setWindowTitle(_escape_title(title))
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
        self.setAttribute(Qt.WidgetAttribute.WA_QuitOnClose, False)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # 画像表示用ラベル（拡大縮小なし）
        self._image_label = QLabel()
        self._image_label.setMargin(0)
        self._image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._image_label.setScaledContents(False)
        self._image_label.setPixmap(QPixmap.fromImage(image))
        layout.addWidget(self._image_label)

        # クライアント領域を画像サイズに合わせる
        self.resize(self._image_label.sizeHint())

    @property
    def image_label(self) -> QLabel:
        """画像を表示しているラベル"""
        return self._image_label

    def closeEvent(self, event: QCloseEvent):
        super().closeEvent(event)
        if event.isAccepted():
            self.closed.emit()


class ImageWindowHandle:
    """
    create_image_window() が返すウィンドウのハンドル

    ウィンドウが閉じられると DISPOSED になり、以後の操作は何もしない。
    """

    def __init__(self, frame: ImageFrame, title: str, size: Tuple[int, int]):
        self._frame: Optional[ImageFrame] = frame
        self._title = title
        self._image_size = size
        self._state = WindowState.SHOWN
        self._callbacks: List[Callable[["ImageWindowHandle"], Any]] = []

        # ハンドルを捨てられてもコールバックが動くようにウィンドウ側から参照する
        frame._handle = self
        frame.closed.connect(self._on_disposed)
        frame.destroyed.connect(self._on_disposed)

    def __repr__(self):
        width, height = self._image_size
        return f"ImageWindowHandle(title={self._title!r}, size={width}x{height}, state={self._state.value})"

    @property
    def title(self) -> str:
        return self._title

    @property
    def state(self) -> WindowState:
        return self._state

    @property
    def is_shown(self) -> bool:
        return self._state is WindowState.SHOWN

    @property
    def is_disposed(self) -> bool:
        return self._state is WindowState.DISPOSED

    @property
    def image_size(self) -> Tuple[int, int]:
        """作成時の画像サイズ (幅, 高さ)"""
        return self._image_size

    @property
    def window(self) -> Optional[ImageFrame]:
        """表示中のウィンドウ。破棄済みならNone"""
        return self._frame

    @property
    def client_size(self) -> Optional[Tuple[int, int]]:
        """現在のクライアント領域のサイズ。破棄済みならNone"""
        frame = self._frame
        if frame is None:
            return None
        size = run_on_ui_thread(frame.size)
        return size.width(), size.height()

    def on_disposed(self, callback: Callable[["ImageWindowHandle"], Any]) -> None:
        """
        ウィンドウ破棄時のコールバックを登録する

        既に破棄済みならその場で呼び出す。

        Args:
            callback: ハンドルを引数に取る関数
        """
        if self.is_disposed:
            callback(self)
        else:
            self._callbacks.append(callback)

    def close(self) -> None:
        """ウィンドウを閉じて破棄する。破棄済みなら何もしない"""
        frame = self._frame
        if frame is None:
            return
        run_on_ui_thread(frame.close)

    def _on_disposed(self, *args):
        if self._state is WindowState.DISPOSED:
            return
        self._state = WindowState.DISPOSED
        self._frame = None
        log_print(DEBUG, f"ウィンドウを破棄しました: {self._title!r}")

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)


def _build_window(title: str, image: Any, size: Tuple[int, int]) -> ImageWindowHandle:
    """UIスレッドでウィンドウを作成して表示する"""
    ensure_application()
    qimage = to_qimage(image)
    frame = ImageFrame(title, qimage)
    frame.show()

    handle = ImageWindowHandle(frame, title, size)
    log_print(DEBUG, f"ウィンドウを作成しました: {title!r} {size[0]}x{size[1]}")
    return handle


def create_image_window(title: str, image: Any) -> ImageWindowHandle:
    """
    画像を表示するトップレベルウィンドウを作成して表示する

    UIスレッド以外から呼ばれた場合は、UIスレッドで作成されるまで待ってから返る。
    ウィンドウが閉じられるのを待つことはない。

    Args:
        title: ウィンドウタイトル（空文字列可）
        image: 表示する画像（uint8のNumPy配列、QImage、QPixmap）

    Returns:
        表示中のウィンドウのハンドル

    Raises:
        InvalidArgumentError: タイトルや画像が不正な場合（ウィンドウは作成されない）
        EnvironmentUnavailableError: ディスプレイがない、またはUIスレッドが応答しない場合
    """
    try:
        if not isinstance(title, str):
            raise InvalidArgumentError(f"タイトルは文字列で指定してください: {type(title).__name__}")
        size = image_size(image)
        return run_on_ui_thread(_build_window, title, image, size)
    except CollageError as e:
        log_print(WARNING, f"画像ウィンドウを作成できませんでした: {e}")
        raise
