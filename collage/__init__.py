"""
collage - メモリ上の画像をデスクトップのウィンドウに表示するヘルパー

create_image_window(title, image) で画像を原寸表示するトップレベルウィンドウを作成し、
そのハンドルを返します。
"""

from .errors import CollageError, InvalidArgumentError, EnvironmentUnavailableError
from .raster import image_size, to_qimage
from .application import display_available, ensure_application, is_ui_thread, run_on_ui_thread
from .frame import ImageFrame, ImageWindowHandle, WindowState, create_image_window

__all__ = [
    'CollageError',
    'InvalidArgumentError',
    'EnvironmentUnavailableError',
    'image_size',
    'to_qimage',
    'display_available',
    'ensure_application',
    'is_ui_thread',
    'run_on_ui_thread',
    'ImageFrame',
    'ImageWindowHandle',
    'WindowState',
    'create_image_window',
]
