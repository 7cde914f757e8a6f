"""Specファイルの探索と行番号付き表示."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class SpecFinder:
    """命名規則に従ってSpecファイルを探索するクラス."""

    def __init__(self, spec_dir: str = "spec", pattern: str = "*_spec.rb") -> None:
        """SpecFinderを初期化する.

        Args:
            spec_dir: Specファイルのルートディレクトリ
            pattern: Specファイル名のglobパターン
        """
        self.spec_dir = Path(spec_dir)
        self.pattern = pattern

    def find(self) -> list[str]:
        """Specファイルのパスをソートして返す.

        Returns:
            `spec/...` 形式のパスのリスト. ディレクトリが存在しなければ空.
        """
        if not self.spec_dir.is_dir():
            logger.warning("Spec directory not found: %s", self.spec_dir)
            return []
        return sorted(
            path.as_posix() for path in self.spec_dir.rglob(self.pattern) if path.is_file()
        )


def number_lines(path: str) -> str:
    """ファイル内容の各行に1始まりの行番号を付ける.

    Args:
        path: ファイルパス

    Returns:
        `N:内容` 形式の行を改行で連結した文字列
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return "\n".join(f"{i}:{line}" for i, line in enumerate(text.splitlines(), start=1))
