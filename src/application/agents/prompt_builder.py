"""選択エージェント共通のプロンプトテンプレート読み込み."""

import logging
from pathlib import Path
from typing import ClassVar

logger = logging.getLogger(__name__)


class SelectionPromptBuilder:
    """system/userテンプレートの読み込みを行うビルダーの基底クラス.

    テンプレートファイルが存在すればそれを使用し、存在しなければ
    サブクラスのフォールバックテンプレートを使用する.
    """

    fallback_templates: ClassVar[dict[str, str]] = {}

    def __init__(self, prompts_dir: str) -> None:
        """SelectionPromptBuilderを初期化する.

        Args:
            prompts_dir: プロンプトテンプレートディレクトリのパス
        """
        self.prompts_dir = Path(prompts_dir)

    def _load_template(self, name: str) -> str:
        """テンプレートファイルを読み込む.

        Args:
            name: テンプレート名（system / user）

        Returns:
            テンプレート文字列
        """
        template_path = self.prompts_dir / f"{name}.txt"
        if template_path.exists():
            return template_path.read_text(encoding="utf-8")

        logger.debug("No template file found at '%s'. Using fallback template.", template_path)
        return self.fallback_templates[name]
