"""shortest_build.yaml設定ファイルの読み込み."""

import os
from pathlib import Path
from typing import Any

import yaml

from src.common.config.settings import AppConfig


class AppConfigLoader:
    """shortest_build.yaml設定ファイルを読み込むローダー."""

    def __init__(self, config_path: str = "config/shortest_build.yaml") -> None:
        """AppConfigLoaderを初期化する.

        Args:
            config_path: 設定ファイルのパス
        """
        self.config_path = Path(config_path)

    def exists(self) -> bool:
        """設定ファイルが存在するかどうか."""
        return self.config_path.exists()

    def load(self) -> AppConfig:
        """YAMLを読み込みPydanticモデルに変換する.

        llmセクションの `_env` サフィックスのフィールドは環境変数で解決する.
        `api_key_env` は解決後も変数名として保持し、api_keyが空の場合は
        その変数から読み込む.
        """
        if not self.config_path.exists():
            msg = f"設定ファイルが見つからない: {self.config_path}"
            raise FileNotFoundError(msg)
        data = yaml.safe_load(self.config_path.read_text()) or {}
        llm = data.get("llm")
        if llm:
            data["llm"] = {**resolve_env_vars(llm), **_env_var_names(llm)}
        config = AppConfig(**data)
        if not config.llm.api_key:
            config.llm.api_key = os.getenv(config.llm.api_key_env, "")
        return config


def resolve_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """_envサフィックスのフィールドを環境変数で解決する.

    未設定の環境変数は空文字列に解決する.
    """
    resolved = {}
    for key, value in config.items():
        if key.endswith("_env"):
            resolved_key = key[:-4]  # "_env" を除去
            resolved[resolved_key] = os.getenv(str(value), "")
        else:
            resolved[key] = value
    return resolved


def _env_var_names(config: dict[str, Any]) -> dict[str, Any]:
    """LLMConfigが変数名として保持するフィールドを取り出す."""
    return {key: value for key, value in config.items() if key == "api_key_env"}
