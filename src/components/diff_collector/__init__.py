"""差分収集コンポーネント."""

from src.components.diff_collector.collector import (
    DiffCollector,
    build_path_filter,
    filter_diff,
)

__all__ = ["DiffCollector", "build_path_filter", "filter_diff"]
