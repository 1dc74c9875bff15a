"""
ロギングモジュール

collage全体で使用するロギング機能を提供します
"""

from .log import (
    setup_logging,
    get_logger,
    get_log_level,
    log_print,
    log_trace,
    DEFAULT_LOGGER,
    DEBUG,
    INFO,
    WARNING,
    ERROR,
    CRITICAL
)
