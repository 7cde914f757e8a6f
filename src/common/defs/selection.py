"""Specファイル選択・Spec選択のデータモデルの定義."""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

_SPEC_ID_PATTERN = re.compile(r"^(?P<path>[^:\s]+):(?P<line>[1-9][0-9]*)$")


class SpecFilesResponse(BaseModel):
    """実行すべきSpecファイルをLLMから受け取るラッパーモデル."""

    model_config = ConfigDict(extra="forbid")

    spec_files: list[Annotated[str, Field(description="Spec file to run")]]


class SpecsResponse(BaseModel):
    """実行すべき個別SpecをLLMから受け取るラッパーモデル."""

    model_config = ConfigDict(extra="forbid")

    specs: list[Annotated[str, Field(description="Specific spec to run in format file_path:line_number")]]


class SpecId(BaseModel):
    """`file_path:line_number` 形式のSpec識別子."""

    path: str
    line: int = Field(ge=1)

    @classmethod
    def parse(cls, value: str) -> "SpecId | None":
        """文字列をSpecIdに変換する. 形式が不正な場合はNoneを返す."""
        match = _SPEC_ID_PATTERN.match(value.strip())
        if match is None:
            return None
        return cls(path=normalize_path(match["path"]), line=int(match["line"]))

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


class LevelResult(BaseModel):
    """1つの信頼度レベルの実行結果を表すモデル."""

    confidence_level: float
    spec_files: list[str] = Field(default_factory=list)
    specs: list[str] = Field(default_factory=list)
    exit_code: int | None = None
    status: Literal["passed", "failed"]
    error_message: str | None = None


class BuildResult(BaseModel):
    """全信頼度レベルの実行結果を表すモデル."""

    levels: list[LevelResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """全レベルが成功したかどうか."""
        return bool(self.levels) and all(level.status == "passed" for level in self.levels)

    @property
    def failed_level(self) -> LevelResult | None:
        """最初に失敗したレベル. 失敗がなければNone."""
        return next((level for level in self.levels if level.status == "failed"), None)


def normalize_path(path: str) -> str:
    """先頭の `./` を取り除いたパスを返す."""
    while path.startswith("./"):
        path = path[2:]
    return path


def format_level(confidence_level: float) -> str:
    """信頼度レベルを表示用の文字列に変換する (80.0 -> "80", 99.9 -> "99.9")."""
    return f"{confidence_level:g}"
