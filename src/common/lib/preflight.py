"""実行前の依存コマンド・認証情報チェック."""

import shutil
from collections.abc import Iterable

from src.common.defs.errors import MissingCredentialError, MissingDependencyError

INSTALL_HINTS = {
    "gh": "Please visit https://cli.github.com/",
    "git": "Please visit https://git-scm.com/downloads",
    "bundle": "Please run `gem install bundler`",
}


def check_commands(commands: Iterable[str]) -> None:
    """指定したコマンドが全てPATH上に存在することを確認する.

    Args:
        commands: 確認するコマンド名

    Raises:
        MissingDependencyError: 見つからないコマンドがあった場合
    """
    for command in commands:
        if shutil.which(command) is None:
            raise MissingDependencyError(command, INSTALL_HINTS.get(command, ""))


def check_credential(api_key: str, env_var: str, env_file: str) -> None:
    """APIキーが設定されていることを確認する.

    Args:
        api_key: 設定から解決済みのAPIキー
        env_var: APIキーを保持する環境変数名
        env_file: 案内に表示するenvファイル名

    Raises:
        MissingCredentialError: APIキーが空の場合
    """
    if not api_key:
        raise MissingCredentialError(env_var, env_file)
