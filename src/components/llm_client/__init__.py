"""LLM client component with provider factory."""

from src.components.llm_client.client import (
    LLMClient,
    create_chat_model,
    supports_strict_schema,
)

__all__ = [
    "LLMClient",
    "create_chat_model",
    "supports_strict_schema",
]
