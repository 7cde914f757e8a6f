"""ロギングユーティリティのテスト."""

import logging

from src.common.lib.logging import (
    GREEN,
    NO_COLOR,
    RED,
    SUCCESS,
    YELLOW,
    ColorFormatter,
    getLogger,
)


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


def test_success_level_name():
    """SUCCESSレベルが登録されている."""
    assert logging.getLevelName(SUCCESS) == "SUCCESS"


def test_error_is_red():
    """ERRORは赤で出力される."""
    formatter = ColorFormatter(fmt="%(message)s")
    assert formatter.format(_record(logging.ERROR, "boom")) == f"{RED}boom{NO_COLOR}"


def test_warning_is_yellow_and_success_is_green():
    """WARNINGは黄、SUCCESSは緑で出力される."""
    formatter = ColorFormatter(fmt="%(message)s")
    assert formatter.format(_record(logging.WARNING, "w")) == f"{YELLOW}w{NO_COLOR}"
    assert formatter.format(_record(SUCCESS, "ok")) == f"{GREEN}ok{NO_COLOR}"


def test_info_is_not_colored():
    """INFOは色付けされない."""
    formatter = ColorFormatter(fmt="%(message)s")
    assert formatter.format(_record(logging.INFO, "plain")) == "plain"


def test_color_disabled():
    """use_color=Falseの場合は色付けしない."""
    formatter = ColorFormatter(fmt="%(levelname)s %(message)s", use_color=False)
    assert formatter.format(_record(logging.ERROR, "boom")) == "ERROR boom"


def test_get_logger_returns_named_logger():
    """指定した名前のロガーを返す."""
    logger = getLogger("src.tests.sample")
    assert logger.name == "src.tests.sample"
    assert logging.getLogger().handlers
