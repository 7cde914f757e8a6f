"""ロギング設定ユーティリティ."""

import logging
import sys

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[0;33m"
NO_COLOR = "\033[0m"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LEVEL_COLORS = {
    logging.ERROR: RED,
    logging.CRITICAL: RED,
    logging.WARNING: YELLOW,
    SUCCESS: GREEN,
}


class ColorFormatter(logging.Formatter):
    """ログレベルに応じてメッセージを色付けするフォーマッタ."""

    def __init__(self, fmt: str = LOG_FORMAT, use_color: bool = True) -> None:
        """ColorFormatterを初期化する.

        Args:
            fmt: ログフォーマット
            use_color: ANSIカラーを使用するかどうか
        """
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno)
        if not self.use_color or color is None:
            return message
        return f"{color}{message}{NO_COLOR}"


def getLogger(name: str) -> logging.Logger:
    """指定された名前のロガーを取得する.

    初回呼び出し時にルートロガーへカラー対応のハンドラを設定してから、ロガーを返す.
    stderrが端末でない場合は色付けしない.

    Args:
        name: ロガー名（通常は__name__を使用）

    Returns:
        ロガーインスタンス
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorFormatter(use_color=sys.stderr.isatty()))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return logging.getLogger(name)
