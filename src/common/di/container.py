"""依存性注入コンテナの定義."""

from dependency_injector import containers, providers

from src.application.agents.spec_case_selector import (
    SpecCasePromptBuilder,
    SpecCaseSelectorAgent,
)
from src.application.agents.spec_file_selector import (
    SpecFilePromptBuilder,
    SpecFileSelectorAgent,
)
from src.application.workflows.shortest_build_workflow import ShortestBuildWorkflow
from src.components.diff_collector.collector import DiffCollector
from src.components.llm_client.client import (
    LLMClient,
    create_chat_model,
    supports_strict_schema,
)
from src.components.spec_finder.finder import SpecFinder
from src.components.spec_runner.runner import SpecRunner


class Container(containers.DeclarativeContainer):
    """アプリケーション全体のDIコンテナ."""

    config = providers.Configuration()

    chat_model = providers.Singleton(
        create_chat_model,
        provider=config.llm["provider"],
        model=config.llm["model"],
        api_key=config.llm["api_key"],
        temperature=config.llm["temperature"],
    )

    llm_client = providers.Singleton(
        LLMClient,
        chat_model=chat_model,
        strict=providers.Callable(supports_strict_schema, config.llm["provider"]),
    )

    diff_collector = providers.Singleton(
        DiffCollector,
        include_dirs=config.diff["include_dirs"],
        include_root_files=config.diff["include_root_files"],
    )

    spec_finder = providers.Singleton(
        SpecFinder,
        spec_dir=config.specs["spec_dir"],
        pattern=config.specs["pattern"],
    )

    spec_runner = providers.Singleton(
        SpecRunner,
        command=config.runner["command"],
    )

    # プロンプトテンプレート（prompts_dir配下のエージェント別ディレクトリ）
    spec_file_prompt_builder = providers.Singleton(
        SpecFilePromptBuilder,
        prompts_dir=providers.Callable(
            "{}/spec_file_selector".format,
            config.prompts["prompts_dir"],
        ),
    )

    spec_case_prompt_builder = providers.Singleton(
        SpecCasePromptBuilder,
        prompts_dir=providers.Callable(
            "{}/spec_case_selector".format,
            config.prompts["prompts_dir"],
        ),
    )

    spec_file_selector = providers.Factory(
        SpecFileSelectorAgent,
        llm_client=llm_client,
        prompt_builder=spec_file_prompt_builder,
    )

    spec_case_selector = providers.Factory(
        SpecCaseSelectorAgent,
        llm_client=llm_client,
        prompt_builder=spec_case_prompt_builder,
    )

    workflow = providers.Factory(
        ShortestBuildWorkflow,
        diff_collector=diff_collector,
        spec_finder=spec_finder,
        spec_file_selector=spec_file_selector,
        spec_case_selector=spec_case_selector,
        spec_runner=spec_runner,
        confidence_levels=config.confidence_levels,
    )
