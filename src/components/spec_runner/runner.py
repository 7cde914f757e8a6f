"""選択されたSpecをテストランナーで実行する."""

import logging
import subprocess
from collections.abc import Sequence

logger = logging.getLogger(__name__)


class SpecRunner:
    """RSpecなどのテストランナーを起動するクラス."""

    def __init__(self, command: Sequence[str] = ("bundle", "exec", "rspec")) -> None:
        """SpecRunnerを初期化する.

        Args:
            command: テストランナーのコマンドと固定引数
        """
        self.command = list(command)

    @property
    def executable(self) -> str:
        """PATH上に必要な実行ファイル名."""
        return self.command[0]

    def run(self, specs: Sequence[str]) -> int:
        """`file_path:line_number` のリストを引数にテストランナーを実行する.

        出力は端末にそのまま流す.

        Args:
            specs: 実行するSpec識別子のリスト

        Returns:
            テストランナーの終了コード
        """
        args = [*self.command, *specs]
        logger.info("Running: %s", " ".join(args))
        return subprocess.run(args, check=False).returncode
