"""テストランナーコンポーネント."""

from src.components.spec_runner.runner import SpecRunner

__all__ = ["SpecRunner"]
