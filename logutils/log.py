"""
ロギング用ユーティリティ

collage全体でのロギング操作を統一的に扱うためのユーティリティ関数群
"""
import os
import sys
import traceback
from typing import Optional, Any

# Pythonの標準loggingモジュールをインポート
import logging as py_logging

# ログレベルの定数定義
DEBUG = py_logging.DEBUG
INFO = py_logging.INFO
WARNING = py_logging.WARNING
ERROR = py_logging.ERROR
CRITICAL = py_logging.CRITICAL

# 既定のロガー名
DEFAULT_LOGGER = 'collage'

_FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'

# 現在のログレベル
_log_level = ERROR

# 作成済みロガー
_loggers = {}

# ファイル出力先のパス
_log_path = None


def setup_logging(level: int = ERROR, logfile: Optional[str] = None) -> None:
    """
    ロギングシステムをセットアップする

    既に作成済みのロガーにもレベルとファイル出力の設定を反映する。

    Args:
        level: ログレベル（デフォルトはERROR）
        logfile: ログの出力先ファイル（デフォルトはNone）
    """
    global _log_level, _log_path
    _log_level = level

    if logfile:
        log_dir = os.path.dirname(logfile)
        try:
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            _log_path = os.path.abspath(logfile)
        except OSError as e:
            sys.stderr.write(f"ログディレクトリを作成できませんでした: {e}\n")
            _log_path = None

    for logger in _loggers.values():
        logger.setLevel(_log_level)
        if _log_path:
            _attach_file_handler(logger)


def _attach_file_handler(logger: py_logging.Logger) -> None:
    """ファイルハンドラーを重複しないように追加する"""
    for handler in logger.handlers:
        if isinstance(handler, py_logging.FileHandler) and handler.baseFilename == _log_path:
            return
    file_handler = py_logging.FileHandler(_log_path, encoding='utf-8')
    file_handler.setFormatter(py_logging.Formatter(_FORMAT))
    logger.addHandler(file_handler)


def get_logger(name: str) -> py_logging.Logger:
    """
    名前付きのロガーを取得する

    Args:
        name: ロガー名

    Returns:
        設定済みのロガーオブジェクト
    """
    if name in _loggers:
        return _loggers[name]

    logger = py_logging.getLogger(name)
    logger.setLevel(_log_level)
    # 親ロガーへ伝播させるとコンソールに二重出力される
    logger.propagate = False

    console = py_logging.StreamHandler()
    console.setFormatter(py_logging.Formatter(_FORMAT))
    logger.addHandler(console)

    if _log_path:
        _attach_file_handler(logger)

    _loggers[name] = logger
    return logger


def get_log_level() -> int:
    """現在のログレベルを返す"""
    return _log_level


def log_print(level: int, message: Any, *args, name: Optional[str] = None, **kwargs) -> None:
    """
    指定したレベルでメッセージをログに出力する

    Args:
        level: ログレベル
        message: 出力するメッセージ
        *args: メッセージのフォーマット引数
        name: ロガー名（デフォルトは'collage'）
        **kwargs: その他のキーワード引数
    """
    if level < _log_level:
        return
    get_logger(name or DEFAULT_LOGGER).log(level, message, *args, **kwargs)


def log_trace(e: Optional[BaseException], level: int, message: Any, *args,
              name: Optional[str] = None, **kwargs) -> None:
    """
    例外のトレース情報を含めてログに出力する

    Args:
        e: 例外オブジェクト（Noneならば現在のスタック）
        level: ログレベル
        message: 出力するメッセージ
        *args: メッセージのフォーマット引数
        name: ロガー名（デフォルトは'collage'）
        **kwargs: その他のキーワード引数
    """
    if level < _log_level:
        return

    log_print(level, message, *args, name=name, **kwargs)

    if e is not None:
        stack = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
    else:
        stack = ''.join(traceback.format_stack()[:-1])  # 自分自身の呼び出しを除外

    get_logger(name or DEFAULT_LOGGER).log(level, "スタックトレース:\n%s", stack)
