"""差分に応じたSpecを信頼度レベル順に実行するshortest-buildスクリプト.

ステージ済み・未ステージ・Pull Requestの差分からLLMが実行すべきSpecを選び、
80% → 95% → 99% → 99.9% の順にテストを実行する. いずれかのレベルで失敗した
時点で終了コード1で終了する.

Usage:
    # Railsアプリのルートで実行
    shortest-build

    # envファイル・設定ファイルを指定
    shortest-build --env-file .env.development.local --config config/shortest_build.yaml
"""

import argparse
import sys
from collections.abc import Sequence

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from src.common.config.app_config_loader import AppConfigLoader
from src.common.config.settings import AppConfig, load_config
from src.common.defs.errors import ShortestBuildError
from src.common.di.container import Container
from src.common.lib.logging import getLogger
from src.common.lib.preflight import check_commands, check_credential

logger = getLogger(__name__)

DEFAULT_ENV_FILE = ".env.development.local"
DEFAULT_CONFIG_PATH = "config/shortest_build.yaml"
REQUIRED_COMMANDS = ("gh", "git")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """コマンドライン引数をパースする."""
    parser = argparse.ArgumentParser(
        description="Run the specs an LLM selects from the current diff, at increasing confidence levels",
    )
    parser.add_argument(
        "--env-file",
        default=DEFAULT_ENV_FILE,
        help=f"APIキーを読み込むenvファイル (default: {DEFAULT_ENV_FILE})",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"YAML設定ファイル. 存在する場合のみ使用する (default: {DEFAULT_CONFIG_PATH})",
    )
    return parser.parse_args(argv)


def load_settings(env_file: str, config_path: str) -> AppConfig:
    """envファイルを読み込んだ上で設定を構築する.

    envファイルの値は既存の環境変数を上書きする.
    """
    load_dotenv(env_file, override=True)
    loader = AppConfigLoader(config_path=config_path)
    if loader.exists():
        logger.info("Loading config from %s", config_path)
        return loader.load()
    return load_config()


def setup(config: AppConfig) -> Container:
    """DIコンテナを初期化して返す."""
    container = Container()
    container.config.from_dict(config.model_dump())
    return container


def main(argv: Sequence[str] | None = None) -> None:
    """shortest-buildを実行する."""
    args = parse_args(argv)

    try:
        check_commands(REQUIRED_COMMANDS)
        config = load_settings(args.env_file, args.config)
        check_commands([config.runner.command[0]])
        check_credential(config.llm.api_key, config.llm.api_key_env, args.env_file)
        workflow = setup(config).workflow()
    except (ShortestBuildError, ValidationError, yaml.YAMLError, FileNotFoundError, ValueError) as e:
        logger.error("Error: %s", e)
        sys.exit(1)

    result = workflow.run()
    if not result.succeeded:
        sys.exit(1)


if __name__ == "__main__":
    main()
