"""LangGraphベースの信頼度レベル別Spec選択・実行ワークフロー."""

import logging
from collections.abc import Sequence
from typing import TypedDict

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from src.application.agents.spec_case_selector import SpecCaseSelectorAgent
from src.application.agents.spec_file_selector import SpecFileSelectorAgent
from src.common.defs.selection import BuildResult, LevelResult, format_level
from src.common.lib.logging import SUCCESS
from src.components.diff_collector.collector import DiffCollector
from src.components.spec_finder.finder import SpecFinder
from src.components.spec_runner.runner import SpecRunner

logger = logging.getLogger(__name__)

SPEC_FILES_FAILURE = "Failed to determine which spec files to run."
SPECS_FAILURE = "Failed to determine specific specs to run."


class LevelState(TypedDict):
    """1つの信頼度レベルのワークフロー状態."""

    confidence_level: float
    diff: str
    available_spec_files: list[str]
    spec_files: list[str]
    specs: list[str]
    exit_code: int | None
    error_message: str | None


class ShortestBuildWorkflow:
    """信頼度レベルを昇順に試し、最初の失敗で打ち切るワークフロー."""

    def __init__(  # noqa: PLR0913
        self,
        diff_collector: DiffCollector,
        spec_finder: SpecFinder,
        spec_file_selector: SpecFileSelectorAgent,
        spec_case_selector: SpecCaseSelectorAgent,
        spec_runner: SpecRunner,
        confidence_levels: Sequence[float],
    ) -> None:
        """ShortestBuildWorkflowを初期化する.

        Args:
            diff_collector: 差分コレクター
            spec_finder: Specファイル探索
            spec_file_selector: Specファイル選択エージェント
            spec_case_selector: 個別Spec選択エージェント
            spec_runner: テストランナー
            confidence_levels: 試行する信頼度レベル
        """
        self.diff_collector = diff_collector
        self.spec_finder = spec_finder
        self.spec_file_selector = spec_file_selector
        self.spec_case_selector = spec_case_selector
        self.spec_runner = spec_runner
        self.confidence_levels = sorted(confidence_levels)

    def build(self) -> CompiledStateGraph:
        """1レベル分のワークフローグラフを構築・コンパイルする.

        Returns:
            コンパイル済みStateGraph
        """
        graph = StateGraph(LevelState)
        graph.add_node("select_spec_files", self._select_spec_files)
        graph.add_node("select_specs", self._select_specs)
        graph.add_node("run_specs", self._run_specs)
        graph.set_entry_point("select_spec_files")
        graph.add_conditional_edges(
            "select_spec_files",
            self._route_after_spec_files,
            {"select_specs": "select_specs", END: END},
        )
        graph.add_conditional_edges(
            "select_specs",
            self._route_after_specs,
            {"run_specs": "run_specs", END: END},
        )
        graph.add_edge("run_specs", END)
        return graph.compile()

    def run(self) -> BuildResult:
        """全信頼度レベルを昇順に実行する.

        差分とSpecファイル一覧は最初に1度だけ取得し、全レベルで共有する.

        Returns:
            実行したレベルの結果. 失敗したレベル以降は含まない.
        """
        diff = self.diff_collector.collect()
        available_spec_files = self.spec_finder.find()
        graph = self.build()
        result = BuildResult()

        for level in self.confidence_levels:
            label = format_level(level)
            logger.info("Running specs for %s%% confidence level...", label)
            state = graph.invoke(
                {
                    "confidence_level": level,
                    "diff": diff,
                    "available_spec_files": available_spec_files,
                    "spec_files": [],
                    "specs": [],
                    "exit_code": None,
                    "error_message": None,
                }
            )
            level_result = self._to_level_result(state)
            result.levels.append(level_result)

            if level_result.status == "failed":
                logger.error("Build failed at %s%% confidence level.", label)
                return result
            logger.log(SUCCESS, "Specs passed for %s%% confidence level.", label)

        logger.log(SUCCESS, "All confidence levels passed successfully!")
        return result

    def _select_spec_files(self, state: LevelState) -> dict:
        """Specファイルを選択するノード.

        Args:
            state: ワークフローの状態

        Returns:
            更新された状態のdict
        """
        label = format_level(state["confidence_level"])
        logger.info("Determining which spec files to run for %s%% confidence level...", label)
        try:
            spec_files = self.spec_file_selector.run(
                state["confidence_level"],
                state["diff"],
                state["available_spec_files"],
            )
        except Exception as e:
            logger.error("%s (%s: %s)", SPEC_FILES_FAILURE, type(e).__name__, e)
            return {"spec_files": [], "error_message": f"{SPEC_FILES_FAILURE} {type(e).__name__}: {e!s}"}

        if not spec_files:
            logger.error(SPEC_FILES_FAILURE)
            return {"spec_files": [], "error_message": SPEC_FILES_FAILURE}

        logger.info("Spec files to run:\n%s", "\n".join(spec_files))
        return {"spec_files": spec_files}

    def _select_specs(self, state: LevelState) -> dict:
        """選択済みSpecファイルから個別Specを選択するノード.

        Args:
            state: ワークフローの状態

        Returns:
            更新された状態のdict
        """
        logger.info("Determining specific specs to run within selected spec files...")
        try:
            specs = self.spec_case_selector.run(
                state["confidence_level"],
                state["diff"],
                state["spec_files"],
            )
        except Exception as e:
            logger.error("%s (%s: %s)", SPECS_FAILURE, type(e).__name__, e)
            return {"specs": [], "error_message": f"{SPECS_FAILURE} {type(e).__name__}: {e!s}"}

        if not specs:
            logger.error(SPECS_FAILURE)
            return {"specs": [], "error_message": SPECS_FAILURE}

        return {"specs": specs}

    def _run_specs(self, state: LevelState) -> dict:
        """選択されたSpecをテストランナーで実行するノード.

        Args:
            state: ワークフローの状態

        Returns:
            更新された状態のdict
        """
        label = format_level(state["confidence_level"])
        logger.info(
            "Running specific specs for %s%% confidence level:\n%s",
            label,
            "\n".join(state["specs"]),
        )
        exit_code = self.spec_runner.run(state["specs"])
        if exit_code != 0:
            return {"exit_code": exit_code, "error_message": f"Specs exited with status {exit_code}"}
        return {"exit_code": exit_code}

    def _route_after_spec_files(self, state: LevelState) -> str:
        return "select_specs" if state["spec_files"] else END

    def _route_after_specs(self, state: LevelState) -> str:
        return "run_specs" if state["specs"] else END

    def _to_level_result(self, state: LevelState) -> LevelResult:
        """最終状態をLevelResultに変換する."""
        passed = state["error_message"] is None and state["exit_code"] == 0
        return LevelResult(
            confidence_level=state["confidence_level"],
            spec_files=state["spec_files"],
            specs=state["specs"],
            exit_code=state["exit_code"],
            status="passed" if passed else "failed",
            error_message=state["error_message"],
        )
