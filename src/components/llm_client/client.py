"""LangChain ChatModelを使用したLLMリクエストクライアント."""

import logging
from typing import TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

STRICT_SCHEMA_PROVIDERS = ("openai", "azure")


def create_chat_model(provider: str, model: str, **kwargs) -> BaseChatModel:  # noqa: ANN003
    """プロバイダ名からChatModelを生成するファクトリ.

    値がNoneのキーワード引数は渡さない.

    Args:
        provider: プロバイダ名（openai / bedrock / azure）
        model: モデル名
        **kwargs: 追加のキーワード引数

    Returns:
        ChatModelインスタンス

    Raises:
        ValueError: 未知のプロバイダが指定された場合
    """
    params = {k: v for k, v in kwargs.items() if v is not None}
    if provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=model, **params)
    if provider == "bedrock":
        from langchain_aws import ChatBedrock

        params.pop("api_key", None)
        return ChatBedrock(model_id=model, **params)
    if provider == "azure":
        from langchain_openai import AzureChatOpenAI

        return AzureChatOpenAI(model=model, **params)
    msg = f"Unknown provider: {provider}"
    raise ValueError(msg)


def supports_strict_schema(provider: str) -> bool:
    """プロバイダがstrictなJSON Schema出力に対応しているかどうか."""
    return provider in STRICT_SCHEMA_PROVIDERS


class LLMClient:
    """LangChainのChatModelをラップするクライアントクラス."""

    def __init__(self, chat_model: BaseChatModel, strict: bool = True) -> None:
        """LLMClientを初期化する.

        Args:
            chat_model: LangChainのChatModel
            strict: strictなJSON Schemaで構造化出力を要求するかどうか
        """
        self.chat_model = chat_model
        self.strict = strict

    def invoke_structured(
        self,
        messages: list[BaseMessage],
        schema: type[T],
    ) -> T:
        """メッセージリストでLLMにリクエストを送信し、構造化された出力を得る.

        Args:
            messages: メッセージリスト
            schema: 出力スキーマ（Pydantic BaseModel）

        Returns:
            構造化されたLLMの応答

        Raises:
            Exception: LLMリクエストが失敗した場合
        """
        try:
            if self.strict:
                structured_llm = self.chat_model.with_structured_output(
                    schema, method="json_schema", strict=True
                )
            else:
                structured_llm = self.chat_model.with_structured_output(schema)
            return structured_llm.invoke(messages)
        except Exception:
            logger.exception("Structured LLM request failed")
            raise

    def ask(self, system_content: str, user_content: str, schema: type[T]) -> T:
        """システム指示とユーザー入力で構造化された出力を得る.

        Args:
            system_content: システムメッセージ
            user_content: ユーザーメッセージ
            schema: 出力スキーマ（Pydantic BaseModel）

        Returns:
            構造化されたLLMの応答
        """
        messages: list[BaseMessage] = [
            SystemMessage(content=system_content),
            HumanMessage(content=user_content),
        ]
        return self.invoke_structured(messages, schema)
