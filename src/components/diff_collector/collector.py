"""ステージ済み・未ステージ・Pull Requestの差分を収集するコレクター."""

import logging
import re
from collections.abc import Sequence

from src.common.lib.shell import CommandRunner, run_command

logger = logging.getLogger(__name__)

DIFF_SOURCES: tuple[tuple[str, ...], ...] = (
    ("git", "diff", "--cached"),
    ("git", "diff"),
    ("gh", "pr", "diff"),
)

DIFF_HEADER_PREFIX = "diff --git"


def build_path_filter(include_dirs: Sequence[str], include_root_files: bool = True) -> re.Pattern[str]:
    """差分ヘッダーの `b/` パスにマッチする正規表現を構築する.

    Args:
        include_dirs: 対象とするトップレベルディレクトリ
        include_root_files: リポジトリ直下のファイルを対象に含めるかどうか

    Returns:
        ヘッダー行に対して検索する正規表現
    """
    alternatives = []
    if include_dirs:
        dirs = "|".join(re.escape(d.strip("/")) for d in include_dirs)
        alternatives.append(f" b/({dirs})/")
    if include_root_files:
        alternatives.append(r" b/[^/]+$")
    if not alternatives:
        # 何にもマッチしない
        return re.compile(r"(?!)")
    return re.compile("|".join(alternatives))


def filter_diff(diff: str, path_filter: re.Pattern[str]) -> str:
    """対象パスのファイルセクションだけを残した差分を返す.

    セクションは `diff --git` で始まる行から次のヘッダーまで. 最初のヘッダーより
    前の行は捨てる.

    Args:
        diff: unified diff文字列
        path_filter: ヘッダー行に適用する正規表現

    Returns:
        フィルタ済みの差分文字列
    """
    kept: list[str] = []
    in_folder = False
    for line in diff.splitlines(keepends=True):
        if line.startswith(DIFF_HEADER_PREFIX):
            in_folder = path_filter.search(line.rstrip("\n")) is not None
        if in_folder:
            kept.append(line)
    return "".join(kept)


class DiffCollector:
    """git/ghから差分を取得し、対象パスでフィルタするコレクター."""

    def __init__(
        self,
        include_dirs: Sequence[str] = ("app", "config", "db", "scripts"),
        include_root_files: bool = True,
        runner: CommandRunner = run_command,
        sources: Sequence[Sequence[str]] = DIFF_SOURCES,
    ) -> None:
        """DiffCollectorを初期化する.

        Args:
            include_dirs: 対象とするトップレベルディレクトリ
            include_root_files: リポジトリ直下のファイルを対象に含めるかどうか
            runner: コマンド実行関数
            sources: 差分を出力するコマンドのリスト（連結順）
        """
        self.path_filter = build_path_filter(include_dirs, include_root_files)
        self.runner = runner
        self.sources = [tuple(source) for source in sources]

    def collect(self) -> str:
        """全ソースの差分を連結し、フィルタした結果を返す.

        失敗したソースは空として扱う.

        Returns:
            フィルタ済みの差分文字列. 差分がなければ空文字列.
        """
        combined = "".join(self._read_source(source) for source in self.sources)
        filtered = filter_diff(combined, self.path_filter)
        logger.info(
            "Collected diff: %d lines (%d lines before filtering)",
            len(filtered.splitlines()),
            len(combined.splitlines()),
        )
        return filtered

    def _read_source(self, source: tuple[str, ...]) -> str:
        """1つのソースコマンドを実行して差分を取得する.

        Args:
            source: 差分を出力するコマンド

        Returns:
            差分文字列. 失敗時は空文字列.
        """
        result = self.runner(source)
        if result.returncode != 0:
            logger.warning(
                "`%s` failed (exit %d): %s",
                " ".join(source),
                result.returncode,
                (result.stderr or "").strip(),
            )
            return ""
        output = result.stdout or ""
        if output and not output.endswith("\n"):
            output += "\n"
        return output
