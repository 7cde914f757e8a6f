"""Specファイル選択エージェントとプロンプト構築の実装."""

import logging
import textwrap

from src.application.agents.prompt_builder import SelectionPromptBuilder
from src.common.defs.selection import SpecFilesResponse, format_level, normalize_path
from src.components.llm_client.client import LLMClient

logger = logging.getLogger(__name__)


class SpecFilePromptBuilder(SelectionPromptBuilder):
    """Specファイル選択用プロンプトの構築を行うビルダー."""

    fallback_templates = {
        "system": (
            "You are an expert software engineer that determines which spec files should be run "
            "to achieve a {confidence_level}% confidence level in the passing build. Analyze the "
            "provided diff and available spec files to make your decision. If there are no spec "
            "files worth running to get to the desired confidence level, return an empty array. "
            "Return only available spec files."
        ),
        "user": textwrap.dedent(
            """
            Diff:
            <diff>
            {diff}
            </diff>

            Available spec files:
            <spec_files>
            {spec_files}
            </spec_files>"""
        ),
    }

    def __init__(self, prompts_dir: str = "prompts/spec_file_selector") -> None:
        """SpecFilePromptBuilderを初期化する.

        Args:
            prompts_dir: プロンプトテンプレートディレクトリのパス
        """
        super().__init__(prompts_dir)

    def build(self, confidence_level: float, diff: str, spec_files: list[str]) -> tuple[str, str]:
        """system/userのプロンプト文字列を構築する.

        Args:
            confidence_level: 目標とする信頼度（%）
            diff: フィルタ済みの差分
            spec_files: 選択候補のSpecファイル

        Returns:
            (systemプロンプト, userプロンプト)
        """
        system = self._load_template("system").format(confidence_level=format_level(confidence_level))
        user = self._load_template("user").format(diff=diff, spec_files="\n".join(spec_files))
        return system, user


class SpecFileSelectorAgent:
    """差分から実行すべきSpecファイルを選択するエージェント."""

    def __init__(self, llm_client: LLMClient, prompt_builder: SpecFilePromptBuilder) -> None:
        """SpecFileSelectorAgentを初期化する.

        Args:
            llm_client: LLMクライアント
            prompt_builder: プロンプト構築ビルダー
        """
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder

    def run(self, confidence_level: float, diff: str, spec_files: list[str]) -> list[str]:
        """信頼度レベルに応じて実行すべきSpecファイルを返す.

        LLMが返したファイルのうち、候補に含まれるものだけを順序を保って返す.

        Args:
            confidence_level: 目標とする信頼度（%）
            diff: フィルタ済みの差分
            spec_files: 選択候補のSpecファイル

        Returns:
            選択されたSpecファイルのリスト. 候補が空なら空リスト.

        Raises:
            Exception: LLMリクエストが失敗した場合
        """
        if not spec_files:
            logger.warning("No spec files available to select from")
            return []

        system, user = self.prompt_builder.build(confidence_level, diff, spec_files)
        response = self.llm_client.ask(system, user, SpecFilesResponse)
        return self._restrict_to_available(response.spec_files, spec_files)

    def _restrict_to_available(self, selected: list[str], available: list[str]) -> list[str]:
        """候補に含まれないファイルと重複を取り除く.

        Args:
            selected: LLMが選択したファイル
            available: 選択候補のファイル

        Returns:
            フィルタ済みのファイルリスト
        """
        available_set = set(available)
        result: list[str] = []
        for raw in selected:
            path = normalize_path(raw.strip())
            if path not in available_set:
                logger.warning("Ignoring unknown spec file from model: %s", raw)
                continue
            if path not in result:
                result.append(path)
        return result
