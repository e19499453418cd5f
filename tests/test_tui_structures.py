#!/usr/bin/env python3
"""
Tests for tui_structures.py - table, banner and tree conversion.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from tui_structures import (
    convert_box_tables,
    convert_pipe_tables,
    convert_structures,
    convert_trees,
    rows_to_list,
    strip_banners,
    tree_item,
)


class TestRowsToList:
    """Tests for the shared row-to-list formatter."""

    def test_two_columns_header_only(self):
        """A lone header row is emitted as the single key/value item."""
        assert rows_to_list([["Key", "Value"]]) == ["- **Key**: Value"]

    def test_two_columns_data_rows(self):
        rows = [["项目", "说明"], ["源码", "Go"], ["部署", "K8s"]]
        assert rows_to_list(rows) == ["- **源码**: Go", "- **部署**: K8s"]

    def test_two_columns_merged_cell(self):
        rows = [["项目", "说明"], ["源码", "Go"], ["", "Gorilla Mux"]]
        assert rows_to_list(rows) == ["- **源码**: Go", "- **源码**: Gorilla Mux"]

    def test_multi_column_layout(self):
        rows = [["a", "b", "c"], ["1", "2", "3"]]
        assert rows_to_list(rows) == ["- **a** / **b** / **c**", "- 1 / 2 / 3"]

    def test_inheritance_follows_last_non_empty_first_cell(self):
        rows = [
            ["a", "b", "c"],
            ["x", "1", "2"],
            ["", "3", "4"],
            ["y", "5", "6"],
            ["", "7", "8"],
        ]
        assert rows_to_list(rows) == [
            "- **a** / **b** / **c**",
            "- x / 1 / 2",
            "- x / 3 / 4",
            "- y / 5 / 6",
            "- y / 7 / 8",
        ]

    def test_rows_padded_and_truncated_to_header(self):
        assert rows_to_list([["a", "b", "c"], ["1", "2"]]) == ["- **a** / **b** / **c**", "- 1 / 2 / "]
        assert rows_to_list([["k", "v"], ["1", "2", "3"]]) == ["- **1**: 2"]


class TestBoxTables:
    """Tests for box-drawing table conversion."""

    def test_double_line_table(self):
        lines = [
            "╔════╦════╗",
            "║ k  ║ v  ║",
            "╠════╬════╣",
            "║ a  ║ 1  ║",
            "╚════╩════╝",
        ]
        assert convert_box_tables(lines) == ["- **a**: 1"]

    def test_surrounding_lines_kept(self):
        lines = ["before", "  ┌───┬───┐", "  │ k │ v │", "  └───┴───┘", "after"]
        assert convert_box_tables(lines) == ["before", "- **k**: v", "after"]

    def test_unclosed_table_left_alone(self):
        lines = ["┌───┬───┐", "│ k │ v │", "no bottom border"]
        assert convert_box_tables(lines) == lines

    def test_block_without_rows_left_alone(self):
        lines = ["┌────┐", "└────┘"]
        assert convert_box_tables(lines) == lines

    def test_empty_spacer_rows_dropped(self):
        lines = ["┌───┬───┐", "│ k │ v │", "│   │   │", "│ a │ 1 │", "└───┴───┘"]
        assert convert_box_tables(lines) == ["- **a**: 1"]

    def test_table_inside_fence_untouched(self):
        lines = ["```", "┌───┬───┐", "│ k │ v │", "└───┴───┘", "```"]
        assert convert_box_tables(lines) == lines


class TestBanners:
    """Tests for rounded banner removal."""

    def test_dashed_banner_removed(self):
        lines = ["╭╌╌╌╌╮", "│ hi │", "╰╌╌╌╌╯", "text"]
        assert strip_banners(lines) == ["text"]

    def test_unclosed_banner_left_alone(self):
        lines = ["╭────╮", "│ hi │"]
        assert strip_banners(lines) == lines


class TestPipeTables:
    """Tests for GFM table conversion."""

    def test_aligned_separator(self):
        lines = ["| a | b | c |", "| :-- | :--: | --: |", "| 1 | 2 | 3 |"]
        assert convert_pipe_tables(lines) == ["- **a** / **b** / **c**", "- 1 / 2 / 3"]

    def test_single_dash_separator_is_not_a_table(self):
        lines = ["| a | b |", "| - | - |", "| 1 | 2 |"]
        assert convert_pipe_tables(lines) == lines

    def test_single_line_is_not_a_table(self):
        lines = ["| --- | --- |"]
        assert convert_pipe_tables(lines) == lines

    def test_empty_rows_discarded(self):
        lines = ["| k | v |", "|---|---|", "|   |   |", "| a | 1 |"]
        assert convert_pipe_tables(lines) == ["- **a**: 1"]

    def test_text_around_table(self):
        lines = ["intro", "| k | v |", "|---|---|", "| a | 1 |", "outro"]
        assert convert_pipe_tables(lines) == ["intro", "- **a**: 1", "outro"]


class TestTrees:
    """Tests for directory tree conversion."""

    def test_tree_item_depth_from_bars(self):
        assert tree_item("│   │   ├── deep.py") == (2, "deep.py")

    def test_tree_item_depth_from_spaces(self):
        """Four columns per level; the 1-2 space UI indent is removed first."""
        assert tree_item("└── top") == (0, "top")
        assert tree_item("      └── x") == (1, "x")
        assert tree_item("          └── y") == (2, "y")

    def test_tree_item_keeps_comment(self):
        assert tree_item("├── a.md    # note") == (0, "a.md    # note")

    def test_spacer_line_dropped(self):
        assert tree_item("│") is None
        assert tree_item("  │   ") is None

    def test_box_rule_is_not_an_item(self):
        assert tree_item("├──┼──┤") is None

    def test_box_bottom_border_stays_literal(self):
        """A box left literal keeps its └──┘ border out of the tree pass."""
        lines = ["┌──┐", "└──┘"]
        assert convert_trees(lines) == lines

    def test_noise_line_ends_tree(self):
        lines = ["├── a", "│ ? for shortcuts"]
        assert convert_trees(lines) == ["- a", "│ ? for shortcuts"]

    def test_blank_lines_inside_tree_dropped(self):
        lines = ["root/", "├── a", "", "└── b", "after"]
        assert convert_trees(lines) == ["root/", "- a", "- b", "after"]

    def test_tree_inside_fence_untouched(self):
        lines = ["```", "├── a", "└── b", "```"]
        assert convert_trees(lines) == lines


class TestConvertStructures:
    """Tests for the combined structural pass."""

    def test_plain_text_unchanged(self):
        text = "no structure here\n  just prose"
        assert convert_structures(text) == text

    def test_all_shapes(self):
        text = "\n".join([
            "╭───╮",
            "│ ✻ │",
            "╰───╯",
            "┌───┬───┐",
            "│ k │ v │",
            "└───┴───┘",
            "| x | y |",
            "|---|---|",
            "| 1 | 2 |",
            "proj/",
            "└── main.go",
        ])
        assert convert_structures(text) == "\n".join([
            "- **k**: v",
            "- **1**: 2",
            "proj/",
            "- main.go",
        ])
