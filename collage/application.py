"""
QApplicationとUIスレッドの管理

ウィジェットはQApplicationを所有するスレッド（UIスレッド）でしか作成・操作できない。
このモジュールはディスプレイの有無の判定、QApplicationの取得/作成、
他スレッドからUIスレッドへの処理の受け渡しを提供する。
"""

import os
import sys
import threading
from typing import Any, Callable, Optional

from PySide6.QtCore import QCoreApplication, QObject, QThread, Qt, Signal, Slot
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from logutils import log_print, DEBUG, INFO, WARNING
from . import config
from .errors import EnvironmentUnavailableError

# このモジュールで作成したQApplication（GCで破棄されないよう保持）
_application: Optional[QApplication] = None

# UIスレッドへの呼び出しを中継するオブジェクト
_invoker: Optional["_UiInvoker"] = None
_invoker_lock = threading.Lock()


def _requested_platforms():
    """QT_QPA_PLATFORMで指定されたプラットフォーム名の一覧"""
    value = os.environ.get("QT_QPA_PLATFORM", "")
    names = []
    for entry in value.split(";"):
        name = entry.split(":", 1)[0].strip().lower()
        if name:
            names.append(name)
    return names


def display_available() -> bool:
    """
    ウィンドウを表示できるディスプレイがあるかどうかを判定する

    Returns:
        QGuiApplicationが既に存在するか、表示先があると判断できればTrue
    """
    if isinstance(QCoreApplication.instance(), QGuiApplication):
        return True

    if any(name in config.HEADLESS_PLATFORMS for name in _requested_platforms()):
        return True

    if sys.platform.startswith("win") or sys.platform == "darwin":
        return True

    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def ensure_application() -> QApplication:
    """
    実行中のQApplicationを返す。なければ作成する

    Returns:
        QApplicationインスタンス

    Raises:
        EnvironmentUnavailableError: ウィジェットを使えない環境の場合
    """
    global _application

    instance = QCoreApplication.instance()
    if instance is not None:
        if not isinstance(instance, QApplication):
            raise EnvironmentUnavailableError(
                f"{type(instance).__name__}が既に存在するため、ウィジェットを作成できません")
        app = instance
    else:
        if not display_available():
            raise EnvironmentUnavailableError(
                "ディスプレイが見つかりません（DISPLAY/WAYLAND_DISPLAY/QT_QPA_PLATFORMを確認してください）")
        if threading.current_thread() is not threading.main_thread():
            raise EnvironmentUnavailableError("QApplicationはメインスレッドでしか作成できません")
        argv = sys.argv[:1] or [config.APPLICATION_NAME]
        # プラットフォームプラグインの初期化に失敗するとQtはプロセスを中断する（例外にならない）。
        # DISPLAYが到達できないXサーバーを指している場合もここで中断される
        app = QApplication(argv)
        _application = app
        log_print(INFO, f"QApplicationを作成しました: platform={app.platformName()}")

    if app.primaryScreen() is None:
        raise EnvironmentUnavailableError("利用可能なスクリーンがありません")

    if is_ui_thread():
        _get_invoker(app)
    return app


def is_ui_thread() -> bool:
    """現在のスレッドがUIスレッドかどうか"""
    app = QCoreApplication.instance()
    if app is None:
        return threading.current_thread() is threading.main_thread()
    return QThread.currentThread() == app.thread()


class _UiCall:
    """UIスレッドで実行する1件の呼び出し"""

    def __init__(self, fn: Callable, args: tuple, kwargs: dict):
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.done = threading.Event()
        self._lock = threading.Lock()
        self._started = False
        self._cancelled = False
        self._result = None
        self._error: Optional[BaseException] = None

    def cancel(self) -> bool:
        """
        まだ開始していなければ取り消す

        Returns:
            取り消せた場合はTrue。既に開始していればFalse
        """
        with self._lock:
            if self._started:
                return False
            self._cancelled = True
            return True

    def run(self):
        with self._lock:
            if self._cancelled:
                return
            self._started = True
        try:
            self._result = self.fn(*self.args, **self.kwargs)
        except Exception as e:
            self._error = e
        finally:
            self.done.set()

    def result(self):
        if self._error is not None:
            raise self._error
        return self._result


class _UiInvoker(QObject):
    """
    キュー接続のシグナルでUIスレッドに呼び出しを渡すオブジェクト

    シグナル:
        posted: 実行する _UiCall を渡す
    """
    posted = Signal(object)

    def __init__(self):
        super().__init__()
        self.posted.connect(self._run, Qt.ConnectionType.QueuedConnection)

    @Slot(object)
    def _run(self, call: _UiCall):
        call.run()


def _get_invoker(app: QCoreApplication) -> _UiInvoker:
    """UIスレッドに属する中継オブジェクトを取得する"""
    global _invoker
    with _invoker_lock:
        if _invoker is None:
            invoker = _UiInvoker()
            if invoker.thread() != app.thread():
                invoker.moveToThread(app.thread())
            _invoker = invoker
        return _invoker


def run_on_ui_thread(fn: Callable, *args, **kwargs) -> Any:
    """
    関数をUIスレッドで実行し、その結果を返す

    UIスレッドから呼ばれた場合はその場で実行する。
    他のスレッドから呼ばれた場合はUIスレッドのイベントループに処理を渡し、
    完了するまで待つ。関数が送出した例外は呼び出し元で再送出される。
    config.UI_CALL_TIMEOUT はUIスレッドで実行が始まるまでの待ち時間に適用される。

    Args:
        fn: 実行する関数
        *args, **kwargs: 関数に渡す引数

    Returns:
        関数の戻り値

    Raises:
        EnvironmentUnavailableError: UIスレッドがない、または応答しない場合
    """
    if is_ui_thread():
        return fn(*args, **kwargs)

    app = QCoreApplication.instance()
    if app is None:
        raise EnvironmentUnavailableError(
            "QApplicationが存在しません。メインスレッドで先に作成してください")

    call = _UiCall(fn, args, kwargs)
    log_print(DEBUG, f"UIスレッドに処理を渡します: {getattr(fn, '__name__', fn)}")
    _get_invoker(app).posted.emit(call)

    if not call.done.wait(config.UI_CALL_TIMEOUT):
        if call.cancel():
            log_print(WARNING, f"UIスレッドが{config.UI_CALL_TIMEOUT}秒以内に応答しませんでした")
            raise EnvironmentUnavailableError("UIスレッドが応答しません")
        # 開始済みの呼び出しは完了まで待つ
        call.done.wait()
    return call.result()
