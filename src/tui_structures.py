"""
tui_structures.py — Structural conversion for TUI transcripts.

Runs before any character is stripped, while table and tree structure is
still visible. The target chat renderer has no GFM table support, so every
table is flattened into list items:

  ┌──────┬──────┐
  │ 项目 │ 说明 │          - **源码**: Go
  ├──────┼──────┤    →     - **技术栈**: Gorilla Mux
  │ 源码 │ Go   │
  └──────┴──────┘

Tables with 3+ columns become a bold header item followed by one
"v0 / v1 / v2" item per row. Rounded banners (╭…╯) are decorative and
deleted. Directory trees (├── │ └──) become nested list items.

Fenced code blocks are passed through untouched. Anything that does not
parse cleanly is left as literal text.
"""
import logging
import re

from tui_filters import (
    BOX_DRAWING_RE,
    EMPTY,
    FENCE,
    TABLE_ROW,
    TREE_ROW,
    classify_line,
)

log = logging.getLogger("tui_markdown")

BOX_TOP_RE = re.compile(r'^[ \t]*[┌╔][─═┬╦]+[┐╗]')
BOX_BOTTOM_RE = re.compile(r'[└╚][─═┴╩]+[┘╝]')
BOX_CELL_SEP_RE = re.compile(r'[│║]')

BANNER_TOP_RE = re.compile(r'^[ \t]*╭[─╌]+╮')
BANNER_BOTTOM_RE = re.compile(r'╰[─╌]+╯')

PIPE_ROW_RE = re.compile(r'^\s*\|')
# | --- | :--: |  (2+ dashes, optional alignment colons)
PIPE_SEPARATOR_RE = re.compile(r'^\s*\|[\s:]*--[\s:|-]*\|\s*$')

TREE_UI_INDENT_RE = re.compile(r'^ {1,2}')
TREE_BRANCH_RE = re.compile(r'[├└]─*')
TREE_CONTINUATION_RE = re.compile(r'^[│\s]*')

# Spaces per level when a └── parent leaves no │ in the prefix
TREE_INDENT_UNIT = 4


def rows_to_list(rows: list[list[str]]) -> list[str]:
    """Format parsed table rows as renderer-safe list items.

    The first row is the header; its width decides the layout:

      2 columns:  - **key**: value          (one item per data row)
      otherwise:  - **c0** / **c1** / **c2**
                  - v0 / v1 / v2            (one item per data row)
    """
    header, data = rows[0], rows[1:]
    width = len(header)

    if width == 2:
        if not data:
            return [f"- **{header[0]}**: {header[1]}"]
        return [f"- **{key}**: {value}" for key, value in _fill_rows(data, width)]

    items = ["- " + " / ".join(f"**{cell}**" for cell in header)]
    items.extend("- " + " / ".join(row) for row in _fill_rows(data, width))
    return items


def _fill_rows(rows: list[list[str]], width: int) -> list[list[str]]:
    """Pad or truncate rows to the header width.

    A row with an empty first cell is a merged-cell continuation and takes
    the first cell of the last row that had one.
    """
    filled = []
    last_first = ""
    for row in rows:
        row = (row + [""] * width)[:width]
        if row[0]:
            last_first = row[0]
        else:
            row = [last_first] + row[1:]
        filled.append(row)
    return filled


def _find_line(lines: list[str], start: int, pattern: re.Pattern):
    """Return the index of the first line at or after start matching pattern."""
    for j in range(start, len(lines)):
        if pattern.search(lines[j]):
            return j
    return None


def _tail_after(line: str, pattern: re.Pattern) -> list[str]:
    """Text left on a closing border line after the border itself."""
    tail = line[pattern.search(line).end():]
    return [tail] if tail.strip() else []


def convert_box_tables(lines: list[str]) -> list[str]:
    """Replace ┌…┘ / ╔…╝ tables with list items."""
    out = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        kind = classify_line(line)
        if kind == FENCE:
            in_fence = not in_fence
        if in_fence or kind != TABLE_ROW or not BOX_TOP_RE.match(line):
            out.append(line)
            i += 1
            continue

        end = _find_line(lines, i + 1, BOX_BOTTOM_RE)
        if end is None:
            # No later top border can close either
            out.extend(lines[i:])
            break

        block = lines[i:end + 1]
        rows = []
        for row_line in block:
            if not BOX_CELL_SEP_RE.search(row_line):
                continue
            cells = [cell.strip() for cell in BOX_CELL_SEP_RE.split(row_line)[1:-1]]
            if any(cells):
                rows.append(cells)

        if not rows:
            out.extend(block)
        else:
            log.debug("box table: %d rows x %d columns", len(rows), len(rows[0]))
            out.extend(rows_to_list(rows))
            out.extend(_tail_after(lines[end], BOX_BOTTOM_RE))
        i = end + 1
    return out


def strip_banners(lines: list[str]) -> list[str]:
    """Delete ╭…╮ … ╰…╯ welcome banners."""
    out = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if classify_line(line) == FENCE:
            in_fence = not in_fence
        if in_fence or not BANNER_TOP_RE.match(line):
            out.append(line)
            i += 1
            continue

        end = _find_line(lines, i + 1, BANNER_BOTTOM_RE)
        if end is None:
            out.extend(lines[i:])
            break
        log.debug("banner: dropped %d lines", end - i + 1)
        out.extend(_tail_after(lines[end], BANNER_BOTTOM_RE))
        i = end + 1
    return out


def _parse_pipe_table(run: list[str]):
    """Return table rows for a run of |-lines, or None if it is not a table."""
    if len(run) < 2:
        return None
    sep_idx = next((k for k, l in enumerate(run) if PIPE_SEPARATOR_RE.match(l)), None)
    if sep_idx is None:
        return None

    rows = []
    for k, row_line in enumerate(run):
        if k == sep_idx:
            continue
        cells = [cell.strip() for cell in row_line.split('|')[1:-1]]
        if any(cells):
            rows.append(cells)
    return rows or None


def _is_pipe_row(line: str, kind: str) -> bool:
    return kind == TABLE_ROW and bool(PIPE_ROW_RE.match(line))


def convert_pipe_tables(lines: list[str]) -> list[str]:
    """Replace GFM pipe tables with list items. Runs without a separator row stay literal."""
    out = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        kind = classify_line(line)
        if kind == FENCE:
            in_fence = not in_fence
        if in_fence or not _is_pipe_row(line, kind):
            out.append(line)
            i += 1
            continue

        j = i
        while j < len(lines) and _is_pipe_row(lines[j], classify_line(lines[j])):
            j += 1
        run = lines[i:j]
        rows = _parse_pipe_table(run)
        if rows is None:
            out.extend(run)
        else:
            log.debug("pipe table: %d rows x %d columns", len(rows), len(rows[0]))
            out.extend(rows_to_list(rows))
        i = j
    return out


def _is_tree_row(line: str, kind: str) -> bool:
    """A ├ └ │ line that is not the bottom border of a box left literal."""
    return kind == TREE_ROW and not BOX_BOTTOM_RE.search(line)


def tree_item(line: str):
    """Reduce one tree line to (depth, label), or None for a pure spacer."""
    line = TREE_UI_INDENT_RE.sub('', line, count=1)

    branch = TREE_BRANCH_RE.search(line)
    prefix = line[:branch.start()] if branch else ""
    if branch and not prefix.replace('│', '').strip():
        # "│   ├── foo" or "    └── foo"
        label = line[branch.end():].strip()
    else:
        # "│   continued text" or bare "│"
        prefix = TREE_CONTINUATION_RE.match(line).group(0)
        label = line[len(prefix):].strip()

    if not BOX_DRAWING_RE.sub('', label).strip():
        # Bare "│" spacer, or a "├──┼──┤" rule with no text
        return None
    bars = prefix.count('│')
    depth = bars if bars else (len(prefix) + TREE_INDENT_UNIT // 2) // TREE_INDENT_UNIT
    return depth, label


def convert_trees(lines: list[str]) -> list[str]:
    """Replace ├── / └── directory trees with nested list items.

    The root label above the tree is kept as-is; blank lines inside the
    tree are dropped.
    """
    out = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        kind = classify_line(line)
        if kind == FENCE:
            in_fence = not in_fence
        if in_fence or not _is_tree_row(line, kind):
            out.append(line)
            i += 1
            continue

        items = 0
        while i < len(lines):
            kind = classify_line(lines[i])
            if kind != EMPTY and not _is_tree_row(lines[i], kind):
                break
            item = tree_item(lines[i]) if kind != EMPTY else None
            if item is not None:
                depth, label = item
                out.append("  " * depth + "- " + label)
                items += 1
            i += 1
        log.debug("tree: %d entries", items)
    return out


def convert_structures(text: str) -> str:
    """Box tables, then banners, then pipe tables, then trees."""
    lines = text.split('\n')
    lines = convert_box_tables(lines)
    lines = strip_banners(lines)
    lines = convert_pipe_tables(lines)
    lines = convert_trees(lines)
    return '\n'.join(lines)
