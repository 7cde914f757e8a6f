"""エージェント層のエクスポート."""

from src.application.agents.spec_case_selector import SpecCaseSelectorAgent
from src.application.agents.spec_file_selector import SpecFileSelectorAgent

__all__ = ["SpecFileSelectorAgent", "SpecCaseSelectorAgent"]
