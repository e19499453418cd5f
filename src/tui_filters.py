"""
tui_filters.py — Shared TUI noise patterns and line classification.

Single source of truth for what counts as terminal chrome in an agent
response rendered by an 80-column split-pane TUI. Used by:
- tui_structures.py (tree/table row detection)
- tui_markdown.py (noise stripping, unwrapping, paragraph spacing)

Every line is classified into one of a closed set of kinds so the pipeline
phases agree on what a heading, list item or fence marker is.
"""
import re


# --- Line kinds ---
NOISE = "NOISE"
HEADING = "HEADING"
LIST_ITEM = "LIST_ITEM"
TABLE_ROW = "TABLE_ROW"
TREE_ROW = "TREE_ROW"
FENCE = "FENCE"
PROSE = "PROSE"
EMPTY = "EMPTY"

FENCE_MARKER = "```"


# --- Whole-line noise (any match deletes the line) ---
FULL_LINE_NOISE = [
    # 1. Tool-use status lines: "⏺ Search(pattern: ...)", "● Bash(ls)"
    re.compile(r'^⏺'),
    re.compile(r'^●\s'),

    # 2. Tool result continuation (always indented under the tool line)
    re.compile(r'^\s*⎿'),

    # 3. Standalone "thought for Ns"
    re.compile(r'^thought for \d+s\s*$'),

    # 4. Input box prompts and mode hints
    re.compile(r'Type your message or @path/to/file'),
    re.compile(r"Press '\w' for [A-Z]+ mode"),
    re.compile(r'\?\s*for shortcuts'),
    re.compile(r'shift\+tab\s+to\s+cyc'),

    # 5. Auto-accept status: "⏵⏵ accept edits on"
    re.compile(r'^\s*⏵⏵\s'),

    # 6. Update status bar: "✓ Update installed · Restart to apply"
    re.compile(r'^\s*[✓✗]\s.*(?:Update installed|Restart to apply)'),
    re.compile(r'✗\s*Auto-?update\s*failed'),

    # 7. Collapsed output markers: "… +334 lines (ctrl+o to expand)"
    re.compile(r'^\s*…\s*\+\d+\s*lines?\s*\(ctrl\+'),

    # 8. Spinner status: "✻ Sautéing… (12s · ↓ 1.2k tokens · esc to interrupt)"
    re.compile(r"^\s*[✶✻✽✢]\s*[A-Z][a-zéèêë'-]+…"),
    re.compile(r'^\s*[✶✻✽✢]+\s*$'),
]


# --- Trailing right-pane fragments ---
# The right pane shows status text ("esc to interrupt", "thought for 4s)",
# "↓ 1.8k tokens)") that bleeds into content after a wide gap and may be cut
# at any column ("rrupt", "upt"). Prose never carries a 4+ space mid-line gap,
# except the "    # comment" annotation of converted trees.
# Every leading whitespace run is anchored to the start of the run, and the
# ")"-terminated scans stop at one pane width, so a line is matched in
# linear time.
TRAILING_FRAGMENT_RE = re.compile(
    r'(?<=\S)\s{4,}(?!#\s)\S.*$'
    r'|(?<!\s)\s{2,}(?:esc to interrupt'
    r'|ctrl\+[a-z] to (?:expand|interrupt)\)?'
    r'|to expand\)'
    r'|thought for \d+s\)?'
    r'|[\d.]+s\s*[·•]\s*thought for \d+s\)'
    r'|↓[^)]{0,80}\)'
    r'|[\d.]+[ks]?\s*tokens[^)]{0,80}\)'
    r'|\d+\.\d+s\))'
    r'.*$'
)

# "Final answer — thought for 3s", "Done thought for 2s", "Sautéed for 30s"
THOUGHT_SUFFIX_RE = re.compile(
    r'(?<!\s)\s*[—–-]\s*thought for \d+s\s*$'
    r'|(?<!\s)\s+thought for \d+s\s*$'
    r'|(?<!\s)\s*[A-Z][a-zéè]+(?:ed|éed) for \d+s\s*$'
)

INLINE_HINT_RE = re.compile(r'(?<!\s)\s*\(ctrl\+[a-z] to (?:expand|interrupt)\)')

# UI glyphs that may survive inline after the whole-line pass
TUI_SYMBOLS_RE = re.compile(r'[⎿▀▄░✦●✻✶✽✢⏺⏵❯]')

# Entire Box Drawing block (U+2500–U+257F), rounded corners included
BOX_DRAWING_RE = re.compile(r'[\u2500-\u257f]')

BOX_DASHES = ("─", "━")

BULLET_RE = re.compile(r'^(\s*)[•◦‣⁃]\s*')


# --- Structure ---
HEADING_RE = re.compile(r'^#{1,6}\s')
LIST_ITEM_RE = re.compile(r'^\s*(?:[-*+]\s|\d+\.\s)')
NESTED_LIST_ITEM_RE = re.compile(r'^ {2,}- ')
TREE_ROW_RE = re.compile(r'^\s*[├└│]')
TABLE_ROW_RE = re.compile(r'^\s*[|┌╔║]')

# A line that is a complete entry by itself, never a truncated wrap
STRUCTURED_LINE_RE = re.compile(
    r'^(?:[-*+]\s|#{1,6}\s|\d+\.\s|[┌├└│]|-{3,}|\*{3,}|_{3,}|\*\*[^*])'
)
# Lines that must never be absorbed as a wrapped line's continuation
STRUCTURED_CONTINUATION_RE = re.compile(
    r'^\s*(?:[-*+]\s|#{1,6}\s|\d+\.\s|-{3,}|\*{3,}|_{3,}|```)'
)

# Padding the TUI adds to a line cut at the column edge
WRAP_PADDING = 10


def is_noise(line: str) -> bool:
    """Return True if the whole line is TUI chrome."""
    for pattern in FULL_LINE_NOISE:
        if pattern.search(line):
            return True
    return False


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE_MARKER)


def classify_line(line: str) -> str:
    """Return the kind of a single line.

    Checked in order: a noise line is never a fence or list item, and a
    heading or list item is never a tree or table row.
    """
    if not line.strip():
        return EMPTY
    if is_noise(line):
        return NOISE
    if is_fence(line):
        return FENCE
    if HEADING_RE.match(line):
        return HEADING
    if LIST_ITEM_RE.match(line):
        return LIST_ITEM
    if TREE_ROW_RE.match(line):
        return TREE_ROW
    if TABLE_ROW_RE.match(line):
        return TABLE_ROW
    return PROSE


def is_structured(line: str) -> bool:
    return bool(STRUCTURED_LINE_RE.match(line.lstrip()))


def is_wrapped(line: str) -> bool:
    """Return True if the raw line was cut at the TUI column edge.

    Must be checked before fragments and padding are stripped: a trailing
    box dash run, or 10+ pad spaces after non-structural content.
    """
    content = line.rstrip()
    if content.endswith(BOX_DASHES):
        return True
    if not content or is_structured(line):
        return False
    return len(line) - len(content) >= WRAP_PADDING


def strip_fragments(line: str) -> str:
    """Remove right-pane status bleed and inline keyboard hints."""
    line = TRAILING_FRAGMENT_RE.sub('', line, count=1)
    line = THOUGHT_SUFFIX_RE.sub('', line, count=1)
    return INLINE_HINT_RE.sub('', line)


def strip_symbols(line: str) -> str:
    """Remove leftover UI glyphs and box-drawing characters."""
    line = TUI_SYMBOLS_RE.sub('', line)
    return BOX_DRAWING_RE.sub('', line)


def normalize_bullet(line: str) -> str:
    """Rewrite a leading •/◦/‣/⁃ bullet to "- ", keeping its indent."""
    return BULLET_RE.sub(r'\1- ', line, count=1)
