#!/usr/bin/env python3
"""
clean_tui.py — Convert a captured agent TUI response into chat-safe Markdown.

Strips TUI chrome (tool-use lines, right-pane status, box borders, banners),
flattens tables and directory trees into lists, re-joins lines wrapped at
80 columns and spaces paragraphs for renderers that only break on blank
lines.

Usage:
    clean-tui data/response.txt
    clean-tui --fix-spaces data/response.txt
    cat response.txt | clean-tui -

Options:
    --fix-spaces    Reinsert spaces into word-merged text using dictionary lookup
    --no-spacing    Skip paragraph spacing (cleaned text only)
    --stdout        Print the result instead of writing a file

Writes output to <filename>.md (<filename>.clean.md for .md input) — NEVER
modifies the original.
"""
import argparse
import logging
import re
import sys
from pathlib import Path

import wordninja

from tui_filters import is_fence
from tui_markdown import (
    clean_tui_output,
    is_code_like,
    is_table_derived,
    normalize_rag_markdown,
)

log = logging.getLogger("tui_markdown")

# Runs of 15+ ASCII letters not glued to a path, identifier or markup
# character are candidates for word-merge repair. CJK neighbours are allowed:
# "使用TheQuickBrownFox框架".
MERGED_RUN_RE = re.compile(r'(?<![A-Za-z0-9_/.\\`*-])[A-Za-z]{15,}(?![A-Za-z0-9_/.\\`*-])')


def fix_merged_spaces(line: str) -> str:
    """Reinsert spaces into word-merged English runs.

    Agent API screen snapshots come from a cursor-positioned terminal and
    can drop the spaces between words. wordninja (English unigram model)
    splits the run back into words.

    Commands, JSON and table-derived "**key**:" lines are left alone, as
    are all-lowercase or all-uppercase runs (identifiers, constants).
    """
    if not line.strip() or is_code_like(line) or is_table_derived(line.lstrip()):
        return line

    def split_merged(match):
        run = match.group(0)
        if run.islower() or run.isupper():
            return run
        words = wordninja.split(run)
        if len(words) <= 1:
            return run
        log.debug("split merged run %r into %d words", run, len(words))
        return ' '.join(words)

    return MERGED_RUN_RE.sub(split_merged, line)


def fix_spaces_outside_fences(text: str) -> tuple[str, int]:
    """Apply fix_merged_spaces to every line outside code fences.

    Returns (text, lines_fixed).
    """
    fixed = []
    count = 0
    in_fence = False
    for line in text.split('\n'):
        if is_fence(line):
            in_fence = not in_fence
        elif not in_fence:
            new_line = fix_merged_spaces(line)
            if new_line != line:
                count += 1
            line = new_line
        fixed.append(line)
    return '\n'.join(fixed), count


def replace_nbsp(text: str) -> str:
    """Replace non-breaking spaces (U+00A0) with regular ASCII spaces."""
    return text.replace('\xa0', ' ')


def clean_text(raw: str, fix_spaces: bool = False, spacing: bool = True) -> tuple[str, dict]:
    """Clean one captured response. Returns (markdown, stats)."""
    cleaned = clean_tui_output(replace_nbsp(raw))

    spaces_fixed = 0
    if fix_spaces:
        cleaned, spaces_fixed = fix_spaces_outside_fences(cleaned)

    if spacing:
        cleaned = normalize_rag_markdown(cleaned)

    total = len(raw.splitlines())
    kept = len(cleaned.splitlines())
    stats = {
        'total_lines': total,
        'kept': kept,
        'pct_removed': round((total - kept) / total * 100, 1) if total else 0,
        'spaces_fixed': spaces_fixed,
    }
    return cleaned, stats


def output_path_for(input_path: Path) -> Path:
    """<file>.md, or <file>.clean.md when the input already is Markdown."""
    if input_path.suffix == '.md':
        return input_path.with_suffix('.clean.md')
    return input_path.with_suffix('.md')


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Convert agent TUI output into chat-safe Markdown.'
    )
    parser.add_argument('file', help="Captured response file, or '-' for stdin")
    parser.add_argument('--fix-spaces', action='store_true',
                        help='Reinsert spaces into word-merged text using dictionary lookup')
    parser.add_argument('--no-spacing', action='store_false', dest='spacing',
                        help='Skip paragraph spacing (cleaned text only)')
    parser.add_argument('--stdout', action='store_true',
                        help='Print the result instead of writing <file>.md')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log pipeline decisions to stderr')
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    if args.file == '-':
        raw = sys.stdin.read()
        cleaned, _ = clean_text(raw, fix_spaces=args.fix_spaces, spacing=args.spacing)
        sys.stdout.write(cleaned + '\n')
        return

    input_path = Path(args.file)
    if not input_path.exists():
        print(f"File not found: {input_path}")
        sys.exit(1)

    raw = input_path.read_text(encoding='utf-8', errors='replace')
    cleaned, stats = clean_text(raw, fix_spaces=args.fix_spaces, spacing=args.spacing)
    log.debug("stats: %s", stats)

    if args.stdout:
        sys.stdout.write(cleaned + '\n')
        return

    output_path = output_path_for(input_path)
    output_path.write_text(cleaned + '\n', encoding='utf-8')

    print(f"Input:    {input_path} ({stats['total_lines']} lines)")
    print(f"Output:   {output_path} ({stats['kept']} lines)")
    print(f"Removed:  {stats['pct_removed']}%")
    if stats['spaces_fixed']:
        print(f"Spaces:   {stats['spaces_fixed']} lines had word-merged text fixed")


if __name__ == '__main__':
    main()
