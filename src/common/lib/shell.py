"""外部コマンド実行のヘルパー."""

import logging
import subprocess
from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], subprocess.CompletedProcess]


def run_command(args: Sequence[str]) -> subprocess.CompletedProcess:
    """コマンドを実行し、標準出力と標準エラーを文字列として取得する.

    終了コードが0以外でも例外は送出しない. コマンドが見つからない場合は
    終了コード127の結果を返す.

    Args:
        args: コマンドと引数

    Returns:
        実行結果
    """
    try:
        return subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        logger.debug("Command not found: %s", args[0])
        return subprocess.CompletedProcess(list(args), 127, stdout="", stderr=str(e))
