"""
collageの設定値

モジュール変数として定義しているので、必要に応じて代入で上書きできます。
"""

# QApplicationを新規作成するときのアプリケーション名
APPLICATION_NAME = "collage"

# ディスプレイサーバーを必要としないQtプラットフォームプラグイン
HEADLESS_PLATFORMS = ("offscreen", "minimal", "minimalegl", "vnc", "eglfs", "linuxfb", "vkkhrdisplay")

# 他スレッドからUIスレッドへの呼び出しを待つ最大秒数（None=無制限）
UI_CALL_TIMEOUT = None

# デモの既定値
DEMO_TITLE = "collage"
DEMO_SIZE = (320, 240)
DEMO_PATTERN = "gradient"
DEMO_PATTERNS = ("gradient", "checker", "solid")
