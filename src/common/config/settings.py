"""アプリケーション設定の管理."""

import os
import shlex

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONFIDENCE_LEVELS = [80.0, 95.0, 99.0, 99.9]


class LLMConfig(BaseModel):
    """LLM設定."""

    model_config = ConfigDict(extra="forbid")

    provider: str = "openai"
    model: str = "gpt-4o-2024-08-06"
    api_key: str = ""
    api_key_env: str = "PERSONAL_OPENAI_API_KEY"
    temperature: float | None = None


class DiffConfig(BaseModel):
    """差分収集設定."""

    model_config = ConfigDict(extra="forbid")

    include_dirs: list[str] = Field(default_factory=lambda: ["app", "config", "db", "scripts"])
    include_root_files: bool = True


class SpecConfig(BaseModel):
    """Specファイル探索設定."""

    model_config = ConfigDict(extra="forbid")

    spec_dir: str = "spec"
    pattern: str = "*_spec.rb"


class RunnerConfig(BaseModel):
    """テストランナー設定."""

    model_config = ConfigDict(extra="forbid")

    command: list[str] = Field(default_factory=lambda: ["bundle", "exec", "rspec"], min_length=1)


class PromptsConfig(BaseModel):
    """プロンプトテンプレート設定."""

    model_config = ConfigDict(extra="forbid")

    prompts_dir: str = "prompts"


class AppConfig(BaseModel):
    """アプリケーション全体の設定."""

    model_config = ConfigDict(extra="forbid")

    llm: LLMConfig = Field(default_factory=LLMConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    specs: SpecConfig = Field(default_factory=SpecConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)
    confidence_levels: list[float] = Field(
        default_factory=lambda: list(DEFAULT_CONFIDENCE_LEVELS),
        min_length=1,
    )

    @field_validator("confidence_levels")
    @classmethod
    def _sort_confidence_levels(cls, v: list[float]) -> list[float]:
        for level in v:
            if not 0 < level <= 100:  # noqa: PLR2004
                msg = f"confidence level must be in (0, 100]: {level}"
                raise ValueError(msg)
        return sorted(set(v))


def parse_confidence_levels(value: str) -> list[float]:
    """カンマ区切りの信頼度レベル文字列をパースする.

    Args:
        value: "80,95,99,99.9" 形式の文字列

    Returns:
        信頼度レベルのリスト
    """
    return [float(part) for part in value.split(",") if part.strip()]


def load_config() -> AppConfig:
    """環境変数から設定を読み込む.

    Returns:
        アプリケーション設定
    """
    api_key_env = os.getenv("SHORTEST_API_KEY_ENV", "PERSONAL_OPENAI_API_KEY")
    runner_command = os.getenv("SHORTEST_RUNNER_COMMAND")
    confidence_levels = os.getenv("SHORTEST_CONFIDENCE_LEVELS")

    return AppConfig(
        llm=LLMConfig(
            provider=os.getenv("SHORTEST_LLM_PROVIDER", "openai"),
            model=os.getenv("SHORTEST_LLM_MODEL", "gpt-4o-2024-08-06"),
            api_key=os.getenv(api_key_env, ""),
            api_key_env=api_key_env,
        ),
        specs=SpecConfig(
            spec_dir=os.getenv("SHORTEST_SPEC_DIR", "spec"),
        ),
        runner=RunnerConfig(
            command=shlex.split(runner_command) if runner_command else ["bundle", "exec", "rspec"],
        ),
        prompts=PromptsConfig(
            prompts_dir=os.getenv("SHORTEST_PROMPTS_DIR", "prompts"),
        ),
        confidence_levels=(
            parse_confidence_levels(confidence_levels)
            if confidence_levels
            else list(DEFAULT_CONFIDENCE_LEVELS)
        ),
    )
