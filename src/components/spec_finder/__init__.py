"""Specファイル探索コンポーネント."""

from src.components.spec_finder.finder import SpecFinder, number_lines

__all__ = ["SpecFinder", "number_lines"]
