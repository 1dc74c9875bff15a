"""
テスト共通のフィクスチャ

Qtはoffscreenプラットフォームで動かすので、ディスプレイのないCI環境でも実行できる。
"""

import os
import threading
import time

# PySide6をインポートする前に設定する必要がある
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest
from PySide6.QtCore import QCoreApplication, QEvent
from PySide6.QtWidgets import QApplication

from collage import ImageFrame, ensure_application


@pytest.fixture(scope="session")
def qapp():
    """テストセッション全体で共有するQApplication"""
    return ensure_application()


@pytest.fixture(autouse=True)
def close_frames(request):
    """テストで開いたウィンドウを後片付けする"""
    yield
    app = QApplication.instance()
    if app is None:
        return
    for widget in QApplication.topLevelWidgets():
        if isinstance(widget, ImageFrame) and widget.isVisible():
            widget.close()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)
    QCoreApplication.processEvents()


def open_frames():
    """現在開いているImageFrameの一覧"""
    return [w for w in QApplication.topLevelWidgets()
            if isinstance(w, ImageFrame) and w.isVisible()]


def solid_rgb(width, height, color=(255, 0, 0)):
    """単色のRGB画像を作成する"""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = color
    return image


def run_in_thread(fn, timeout=10.0):
    """
    別スレッドでfnを実行し、その間メインスレッドでイベントを処理する

    Returns:
        (戻り値, 例外) のタプル
    """
    outcome = {"result": None, "error": None}

    def _target():
        try:
            outcome["result"] = fn()
        except Exception as e:
            outcome["error"] = e

    thread = threading.Thread(target=_target)
    thread.start()
    deadline = time.monotonic() + timeout
    while thread.is_alive() and time.monotonic() < deadline:
        QCoreApplication.processEvents()
        thread.join(0.01)
    assert not thread.is_alive(), "ワーカースレッドが終了しませんでした"
    return outcome["result"], outcome["error"]
