"""共通の型定義をエクスポートする."""

from src.common.defs.errors import (
    MissingCredentialError,
    MissingDependencyError,
    ShortestBuildError,
)
from src.common.defs.selection import (
    BuildResult,
    LevelResult,
    SpecFilesResponse,
    SpecId,
    SpecsResponse,
    format_level,
)

__all__ = [
    "ShortestBuildError",
    "MissingDependencyError",
    "MissingCredentialError",
    "SpecFilesResponse",
    "SpecsResponse",
    "SpecId",
    "LevelResult",
    "BuildResult",
    "format_level",
]
