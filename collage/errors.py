"""
collage共通の例外定義
"""


class CollageError(Exception):
    """
    collageが送出するエラーの基底クラス
    """
    pass


class InvalidArgumentError(CollageError, ValueError):
    """
    引数が不正であることを示す例外

    画像のサイズが0以下、未対応の画像型・dtype・チャンネル数、
    文字列でないタイトルなど。
    """
    pass


class EnvironmentUnavailableError(CollageError, RuntimeError):
    """
    ウィンドウを作成できる環境がないことを示す例外

    ディスプレイがない、ツールキットの初期化に失敗した、
    UIスレッドが応答しないなど。
    """
    pass
