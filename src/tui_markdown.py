"""
tui_markdown.py — Turn raw agent TUI output into chat-safe Markdown.

Processing pipeline (order matters):

  1. Structural conversion (tui_structures) — box tables, banners, GFM
     tables and directory trees, before any character is stripped
  2. Noise stripping — whole-line chrome, right-pane fragments, inline
     glyphs and box-drawing leftovers, bullet glyphs → "- "
  3. Unwrapping — lines cut at the 80-column edge are re-joined
  4. Blank line collapsing — 2+ blank lines → 1
  5. Deindenting — drop the 2-space TUI indent outside code fences, keep
     nested list indentation from tree conversion

clean_tui_output() runs 1–5. normalize_rag_markdown() is the separate
paragraph spacing pass the chat renderer needs (it only breaks paragraphs
on blank lines); callers apply it to already-cleaned text, or use
clean_for_chat() for both.

All functions are pure and never raise on string input.
"""
import logging
import re
from dataclasses import dataclass

from tui_filters import (
    EMPTY,
    FENCE,
    FENCE_MARKER,
    LIST_ITEM,
    NESTED_LIST_ITEM_RE,
    NOISE,
    STRUCTURED_CONTINUATION_RE,
    classify_line,
    is_fence,
    is_wrapped,
    normalize_bullet,
    strip_fragments,
    strip_symbols,
)
from tui_structures import convert_structures

log = logging.getLogger("tui_markdown")


@dataclass
class LineRecord:
    """One line during stripping/unwrapping.

    wrapped: the raw line was cut at the column edge and continues on the
    next non-empty line.
    """
    text: str
    wrapped: bool = False


def strip_line_noise(lines: list[str]) -> list[LineRecord]:
    """Phase 2: per-line chrome removal.

    Noise lines become empty records (collapsed later). Wrap detection
    looks at the raw line, since stripping removes the evidence. Fenced
    code only loses trailing whitespace.
    """
    records = []
    in_fence = False
    for line in lines:
        kind = classify_line(line)
        if kind == FENCE:
            in_fence = not in_fence
            records.append(LineRecord(line.rstrip()))
        elif in_fence:
            records.append(LineRecord(line.rstrip()))
        elif kind == NOISE:
            records.append(LineRecord(""))
        else:
            wrapped = is_wrapped(line)
            line = normalize_bullet(strip_symbols(strip_fragments(line)))
            records.append(LineRecord(line.rstrip(), wrapped))
    return records


def unwrap_lines(records: list[LineRecord]) -> list[str]:
    """Phase 3: merge wrapped lines with their continuation.

    A list item, heading, rule or fence is never absorbed. The merged
    record takes the continuation's wrapped flag so chains keep merging.
    """
    merged = []
    for record in records:
        prev = merged[-1] if merged else None
        if (prev is not None and prev.wrapped and record.text
                and not STRUCTURED_CONTINUATION_RE.match(record.text)):
            continuation = record.text.lstrip()
            text = f"{prev.text} {continuation}" if prev.text else continuation
            merged[-1] = LineRecord(text, record.wrapped)
        else:
            merged.append(record)
    return [record.text for record in merged]


def collapse_blank_lines(lines: list[str]) -> list[str]:
    """Phase 4: runs of 2+ empty lines become one."""
    result = []
    for line in lines:
        if line == "" and result and result[-1] == "":
            continue
        result.append(line)
    return result


def deindent(lines: list[str]) -> list[str]:
    """Phase 5: strip the TUI indent outside code fences.

    Headings and list markers must start at column 0 for the renderer.
    Nested "  - item" lines keep their indent; fence markers are always
    unindented; fenced content is untouched.
    """
    result = []
    in_fence = False
    for line in lines:
        if is_fence(line):
            in_fence = not in_fence
            result.append(line.lstrip())
        elif in_fence or NESTED_LIST_ITEM_RE.match(line):
            result.append(line)
        else:
            result.append(line.lstrip())
    return result


def clean_tui_output(text: str) -> str:
    """Remove TUI artifacts and produce clean Markdown (phases 1–5).

    Returns "" for empty or all-noise input.
    """
    if not text:
        return ""
    text = convert_structures(text.replace('\r\n', '\n'))
    records = strip_line_noise(text.split('\n'))
    lines = collapse_blank_lines(unwrap_lines(records))
    log.debug("cleaned: %d records -> %d lines", len(records), len(lines))
    return '\n'.join(deindent(lines)).strip()


# --- Paragraph spacing ---

# Lines produced by table flattening:
#   - **key**: value / - **c0** / **c1**   and   - v0 / v1 / v2
BOLD_KEY_RE = re.compile(r'^(?:-\s+)?\*\*[^*]+\*\*\s*[:/]')
SLASH_ROW_RE = re.compile(r'^(?:-\s+)?[^|*#\-\d].+\s/\s')

# Commands, HTTP calls and JSON that arrive without fences
CODE_LIKE_PATTERNS = [
    re.compile(
        r'^(?:curl|wget|docker|git|npm|npx|node|python|pip|go |make|ssh|scp|rsync'
        r'|tar|cat|echo|export|source|chmod|chown|mkdir|rm|cp|mv|ls|cd|grep|awk|sed)\b'
    ),
    re.compile(r'^(?:GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)\s+/'),
    re.compile(r'^#\s'),                      # shell comment
    re.compile(r'^-[A-Za-z]'),                # -H, -d flag continuation
    re.compile(r'^\s*[{}\[\]]'),              # JSON brackets
    re.compile(r'^\s*"[^"]+"\s*:'),           # "key": value
    re.compile(r'\\\s*$'),                    # trailing backslash
    re.compile(r'^\s{2,}(?:[-"]|\w+=|[{}\[\]])'),
]

CONNECTOR_END_RE = re.compile(r'[+|,]\s*$')
# "(", lowercase, CJK ideographs, hiragana, katakana
CONTINUATION_START_RE = re.compile(r'^[(\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ffa-z]')
SENTENCE_END_RE = re.compile(r'[。！？.!?…]\s*$')


def is_table_derived(line: str) -> bool:
    return bool(BOLD_KEY_RE.match(line) or SLASH_ROW_RE.match(line))


def is_code_like(line: str) -> bool:
    return any(pattern.search(line) for pattern in CODE_LIKE_PATTERNS)


def needs_blank_line(line: str, next_line: str) -> bool:
    """Decide whether a paragraph break goes between two adjacent lines (outside fences)."""
    kind, next_kind = classify_line(line), classify_line(next_line)
    if kind == EMPTY or next_kind == EMPTY:
        return False
    if kind == LIST_ITEM and next_kind == LIST_ITEM:
        return False
    if is_table_derived(line) and is_table_derived(next_line):
        return False
    if is_code_like(line) and is_code_like(next_line):
        return False
    # Sentence cut at column 80: "基于 Nginx +" / "(Lua) 开发。"
    if CONNECTOR_END_RE.search(line) and CONTINUATION_START_RE.match(next_line):
        return False
    if next_line.startswith('(') and not SENTENCE_END_RE.search(line):
        return False
    # Headings get their blank line like any other paragraph
    return True


def normalize_rag_markdown(text: str) -> str:
    """Insert the blank lines the chat renderer needs between paragraphs.

    Never touches fenced code; an unclosed fence suppresses insertion for
    the rest of the text.
    """
    lines = text.split('\n')
    result = []
    in_fence = False
    for i, line in enumerate(lines):
        result.append(line)
        if line.startswith(FENCE_MARKER):
            in_fence = not in_fence
        if in_fence:
            continue
        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        if needs_blank_line(line, next_line):
            result.append("")
    return '\n'.join(result)


def clean_for_chat(text: str) -> str:
    """clean_tui_output() followed by normalize_rag_markdown()."""
    return normalize_rag_markdown(clean_tui_output(text))
