"""個別Spec選択エージェントとプロンプト構築の実装."""

import logging
import textwrap
from collections.abc import Callable

from src.application.agents.prompt_builder import SelectionPromptBuilder
from src.common.defs.selection import SpecId, SpecsResponse, format_level
from src.components.llm_client.client import LLMClient
from src.components.spec_finder.finder import number_lines

logger = logging.getLogger(__name__)


class SpecCasePromptBuilder(SelectionPromptBuilder):
    """個別Spec選択用プロンプトの構築を行うビルダー."""

    fallback_templates = {
        "system": (
            "You are an expert software engineer that determines which specific specs within the "
            "provided spec files should be run to achieve a {confidence_level}% confidence level "
            "in the passing build. Analyze the provided diff and spec file contents to make your "
            "decision. Return the specific spec lines to run in the format "
            "'file_path:line_number'."
        ),
        "user": textwrap.dedent(
            """
            Diff:
            <diff>
            {diff}
            </diff>

            Spec file contents:
            <spec_contents>
            {spec_contents}
            </spec_contents>"""
        ),
    }

    def __init__(
        self,
        prompts_dir: str = "prompts/spec_case_selector",
        reader: Callable[[str], str] = number_lines,
    ) -> None:
        """SpecCasePromptBuilderを初期化する.

        Args:
            prompts_dir: プロンプトテンプレートディレクトリのパス
            reader: ファイルを行番号付きで読み込む関数
        """
        super().__init__(prompts_dir)
        self.reader = reader

    def build(self, confidence_level: float, diff: str, spec_files: list[str]) -> tuple[str, str]:
        """system/userのプロンプト文字列を構築する.

        Args:
            confidence_level: 目標とする信頼度（%）
            diff: フィルタ済みの差分
            spec_files: 選択済みのSpecファイル

        Returns:
            (systemプロンプト, userプロンプト)
        """
        system = self._load_template("system").format(confidence_level=format_level(confidence_level))
        user = self._load_template("user").format(
            diff=diff,
            spec_contents=self._format_spec_contents(spec_files),
        )
        return system, user

    def _format_spec_contents(self, spec_files: list[str]) -> str:
        """Specファイルごとに `File: パス` と行番号付き内容を連結する.

        Args:
            spec_files: Specファイルのリスト

        Returns:
            連結されたファイル内容
        """
        return "".join(f"File: {path}\n{self.reader(path)}\n\n" for path in spec_files)


class SpecCaseSelectorAgent:
    """選択済みSpecファイルから実行すべき個別Specを選択するエージェント."""

    def __init__(self, llm_client: LLMClient, prompt_builder: SpecCasePromptBuilder) -> None:
        """SpecCaseSelectorAgentを初期化する.

        Args:
            llm_client: LLMクライアント
            prompt_builder: プロンプト構築ビルダー
        """
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder

    def run(self, confidence_level: float, diff: str, spec_files: list[str]) -> list[str]:
        """信頼度レベルに応じて実行すべき `file_path:line_number` を返す.

        Args:
            confidence_level: 目標とする信頼度（%）
            diff: フィルタ済みの差分
            spec_files: 選択済みのSpecファイル

        Returns:
            Spec識別子のリスト. ファイルが空なら空リスト.

        Raises:
            Exception: LLMリクエストが失敗した場合
        """
        if not spec_files:
            return []

        system, user = self.prompt_builder.build(confidence_level, diff, spec_files)
        response = self.llm_client.ask(system, user, SpecsResponse)
        return self._validate_specs(response.specs, spec_files)

    def _validate_specs(self, specs: list[str], spec_files: list[str]) -> list[str]:
        """形式不正・対象外ファイルの識別子と重複を取り除く.

        Args:
            specs: LLMが返した識別子
            spec_files: 選択済みのSpecファイル

        Returns:
            正規化済みの識別子リスト
        """
        allowed = set(spec_files)
        result: list[str] = []
        for raw in specs:
            spec_id = SpecId.parse(raw)
            if spec_id is None:
                logger.warning("Ignoring malformed spec identifier from model: %s", raw)
                continue
            if spec_id.path not in allowed:
                logger.warning("Ignoring spec outside the selected files: %s", raw)
                continue
            identifier = str(spec_id)
            if identifier not in result:
                result.append(identifier)
        return result
