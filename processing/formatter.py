"""
ProposalPress: Inline Formatter

Converts cleaned section text into a small, line-oriented HTML fragment.
Each output line is one element, which keeps the fragment easy to re-read
for the DOCX renderer:

    <ul>
    <li>first bullet</li>
    </ul>
    <p>Plain paragraph with <strong>bold</strong> text</p>

Only bullets, **bold** and *emphasis* are recognized. This is not a Markdown
parser.
"""

import html
import re
from dataclasses import replace
from typing import List

from .models import Section
from .text_cleaner import TextNormalizer

BULLET_LINE = re.compile(rf'^{TextNormalizer.CANONICAL_BULLET} (.+)$')
BOLD = re.compile(r'\*\*(.+?)\*\*')
EMPHASIS = re.compile(r'\*(.+?)\*')
SPACE_RUN = re.compile(r' {2,}')
MARKUP_TAG = re.compile(r'<[^>]*>')

LIST_OPEN = "<ul>"
LIST_CLOSE = "</ul>"


def format_inline(text: str) -> str:
    """Escape HTML, then apply bold and emphasis markers"""
    text = html.escape(text, quote=False)
    text = BOLD.sub(r'<strong>\1</strong>', text)
    text = EMPHASIS.sub(r'<em>\1</em>', text)
    return SPACE_RUN.sub(' ', text)


def format_section_content(content: str) -> str:
    """
    Format one section's text.

    Bullet lines become <li> items, consecutive items share one <ul>, and
    every other non-blank line becomes its own <p>.
    """
    output: List[str] = []
    in_list = False

    for raw_line in content.split('\n'):
        line = raw_line.strip()
        bullet = BULLET_LINE.match(line)

        if bullet:
            if not in_list:
                output.append(LIST_OPEN)
                in_list = True
            output.append(f"<li>{format_inline(bullet.group(1).strip())}</li>")
            continue

        if in_list:
            output.append(LIST_CLOSE)
            in_list = False

        if line:
            output.append(f"<p>{format_inline(line)}</p>")

    if in_list:
        output.append(LIST_CLOSE)

    return '\n'.join(output)


def apply_formatting(sections: List[Section]) -> List[Section]:
    """Return new sections whose content is formatted markup"""
    return [replace(section, content=format_section_content(section.content)) for section in sections]


def strip_markup(content: str) -> str:
    """Remove tags and unescape entities, for word counts and plain-text output"""
    return html.unescape(MARKUP_TAG.sub('', content))
