"""shortest-buildスクリプトのテスト."""

from unittest.mock import MagicMock

import pytest

from src.common.config.settings import AppConfig, LLMConfig
from src.common.defs.errors import MissingCredentialError, MissingDependencyError
from src.common.defs.selection import BuildResult, LevelResult
from src.common.lib.preflight import check_commands, check_credential
from src.scripts import run_shortest_build


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """envファイル・設定ファイルのないRailsプロジェクト相当のディレクトリ."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "SHORTEST_API_KEY_ENV",
        "SHORTEST_LLM_PROVIDER",
        "SHORTEST_LLM_MODEL",
        "SHORTEST_RUNNER_COMMAND",
        "SHORTEST_CONFIDENCE_LEVELS",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def all_commands(monkeypatch):
    monkeypatch.setattr("src.common.lib.preflight.shutil.which", lambda command: f"/usr/bin/{command}")


def _fake_container(monkeypatch, result: BuildResult) -> MagicMock:
    container = MagicMock()
    container.workflow.return_value.run.return_value = result
    monkeypatch.setattr(run_shortest_build, "setup", lambda config: container)
    return container


# ---------------------------------------------------------------------------
# 事前チェック
# ---------------------------------------------------------------------------


def test_check_commands_missing_gh(monkeypatch):
    """ghが存在しない場合はインストール案内付きのエラー."""
    monkeypatch.setattr("src.common.lib.preflight.shutil.which", lambda command: None)

    with pytest.raises(MissingDependencyError, match="https://cli.github.com/"):
        check_commands(["gh"])


def test_check_credential_empty():
    """APIキーが空の場合はenvファイル名を含むエラー."""
    with pytest.raises(MissingCredentialError, match="PERSONAL_OPENAI_API_KEY is not set"):
        check_credential("", "PERSONAL_OPENAI_API_KEY", ".env.development.local")


def test_check_credential_present():
    """APIキーがあればエラーにならない."""
    check_credential("sk-test", "PERSONAL_OPENAI_API_KEY", ".env.development.local")


# ---------------------------------------------------------------------------
# 設定の読み込み
# ---------------------------------------------------------------------------


def test_load_settings_env_file_overrides_environment(project_dir, monkeypatch):
    """envファイルの値が既存の環境変数を上書きする."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "stale")
    (project_dir / ".env.development.local").write_text("PERSONAL_OPENAI_API_KEY=sk-from-file\n")

    config = run_shortest_build.load_settings(".env.development.local", "config/shortest_build.yaml")

    assert config.llm.api_key == "sk-from-file"


def test_load_settings_uses_yaml_when_present(project_dir, monkeypatch):
    """設定ファイルが存在すればYAMLから読み込む."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    (project_dir / "config").mkdir()
    (project_dir / "config/shortest_build.yaml").write_text("runner:\n  command: [bin/rspec]\n")

    config = run_shortest_build.load_settings(".env.development.local", "config/shortest_build.yaml")

    assert config.runner.command == ["bin/rspec"]
    assert config.llm.api_key == "sk-test"


def test_load_settings_ignores_rails_app_yaml(project_dir, monkeypatch):
    """Railsアプリ自身のconfig/app.yamlは読み込まない."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    (project_dir / "config").mkdir()
    (project_dir / "config/app.yaml").write_text("production:\n  host: example.com\n")

    config = run_shortest_build.load_settings(
        ".env.development.local", run_shortest_build.DEFAULT_CONFIG_PATH
    )

    assert run_shortest_build.DEFAULT_CONFIG_PATH == "config/shortest_build.yaml"
    assert config.runner.command == ["bundle", "exec", "rspec"]


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


def test_main_exits_when_gh_missing(project_dir, monkeypatch):
    """ghがインストールされていなければ終了コード1."""
    monkeypatch.setattr("src.common.lib.preflight.shutil.which", lambda command: None)

    with pytest.raises(SystemExit) as exc_info:
        run_shortest_build.main([])

    assert exc_info.value.code == 1


def test_main_exits_when_credential_missing(project_dir, monkeypatch, all_commands):
    """APIキーが未設定なら終了コード1."""
    monkeypatch.delenv("PERSONAL_OPENAI_API_KEY", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        run_shortest_build.main([])

    assert exc_info.value.code == 1


def test_main_exits_on_invalid_config(project_dir, monkeypatch, all_commands):
    """不正な設定ファイルなら終了コード1."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    (project_dir / "bad.yaml").write_text("confidence_levels: [0]\n")

    with pytest.raises(SystemExit) as exc_info:
        run_shortest_build.main(["--config", "bad.yaml"])

    assert exc_info.value.code == 1


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SHORTEST_CONFIDENCE_LEVELS", "80,high"),
        ("SHORTEST_RUNNER_COMMAND", "bundle exec 'rspec"),
        ("SHORTEST_LLM_PROVIDER", "unknown"),
    ],
)
def test_main_exits_on_invalid_environment(project_dir, monkeypatch, all_commands, name, value):
    """パースできない環境変数や未知のプロバイダはトレースバックではなく終了コード1."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv(name, value)

    with pytest.raises(SystemExit) as exc_info:
        run_shortest_build.main([])

    assert exc_info.value.code == 1


def test_main_exits_on_unknown_provider_in_yaml(project_dir, monkeypatch, all_commands, caplog):
    """設定ファイルの未知のプロバイダはワークフロー構築時にエラー終了する."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    (project_dir / "app.yaml").write_text(
        "llm:\n  provider: unknown\n  api_key_env: PERSONAL_OPENAI_API_KEY\n"
    )

    with pytest.raises(SystemExit) as exc_info:
        run_shortest_build.main(["--config", "app.yaml"])

    assert exc_info.value.code == 1
    assert "Unknown provider: unknown" in caplog.text


def test_main_succeeds_when_all_levels_pass(project_dir, monkeypatch, all_commands):
    """全レベルが成功すれば正常終了する."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    container = _fake_container(
        monkeypatch,
        BuildResult(levels=[LevelResult(confidence_level=80, exit_code=0, status="passed")]),
    )

    run_shortest_build.main([])

    container.workflow.return_value.run.assert_called_once()


def test_main_exits_when_a_level_fails(project_dir, monkeypatch, all_commands):
    """いずれかのレベルが失敗すれば終了コード1."""
    monkeypatch.setenv("PERSONAL_OPENAI_API_KEY", "sk-test")
    _fake_container(
        monkeypatch,
        BuildResult(
            levels=[
                LevelResult(confidence_level=80, exit_code=0, status="passed"),
                LevelResult(confidence_level=95, exit_code=1, status="failed"),
            ]
        ),
    )

    with pytest.raises(SystemExit) as exc_info:
        run_shortest_build.main([])

    assert exc_info.value.code == 1


def test_setup_wires_workflow():
    """DIコンテナが設定からワークフローを構築する."""
    config = AppConfig(llm=LLMConfig(api_key="sk-test"), confidence_levels=[99, 80])

    workflow = run_shortest_build.setup(config).workflow()

    assert workflow.confidence_levels == [80, 99]
    assert workflow.spec_runner.command == ["bundle", "exec", "rspec"]
    assert workflow.spec_file_selector.prompt_builder.prompts_dir.as_posix() == "prompts/spec_file_selector"
    assert workflow.spec_case_selector.prompt_builder.prompts_dir.as_posix() == "prompts/spec_case_selector"


def test_setup_builds_chat_model_from_llm_section():
    """llmセクションのプロバイダ・モデルからChatModelとstrict設定を組み立てる."""
    from langchain_openai import ChatOpenAI

    config = AppConfig(llm=LLMConfig(provider="openai", model="gpt-4o-mini", api_key="sk-test"))

    container = run_shortest_build.setup(config)
    llm_client = container.llm_client()

    assert isinstance(llm_client.chat_model, ChatOpenAI)
    assert llm_client.chat_model.model_name == "gpt-4o-mini"
    assert llm_client.strict is True
    assert container.workflow().spec_file_selector.llm_client is llm_client
