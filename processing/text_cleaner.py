"""
Text Normalization
Cleans raw proposal exports (chat transcripts, pasted drafts) before parsing
"""

import re


class TextNormalizer:
    """Clean and normalize raw proposal text"""

    CANONICAL_BULLET = "\u2022"

    # Unicode replacements for common export issues
    UNICODE_REPLACEMENTS = {
        '\xa0': ' ',     # Non-breaking space
        '\u202f': ' ',  # Narrow non-breaking space
        '\u2007': ' ',  # Figure space
    }

    ISOLATED_BULLET = re.compile(r'^[ \t]*[-•][ \t]*$', re.MULTILINE)
    DASH_BULLET = re.compile(r'^[ \t]*- ', re.MULTILINE)
    SEPARATOR_LINE = re.compile(r'^[ \t]*(?:-{3,}|={3,}|_{3,}|\*{3,})[ \t]*$', re.MULTILINE)
    EXCESS_NEWLINES = re.compile(r'\n(?:[ \t]*\n){2,}')
    TRAILING_WHITESPACE = re.compile(r'[ \t]+$', re.MULTILINE)

    @staticmethod
    def clean(text: str) -> str:
        """
        Normalize raw text.

        Steps:
        1. Normalize line endings and non-breaking spaces
        2. Remove lines holding only a bullet marker
        3. Rewrite "- " bullets to the canonical bullet glyph
        4. Turn separator lines into blank lines
        5. Collapse 3+ newlines to a single blank line
        6. Strip trailing whitespace and trim

        Args:
            text: Raw proposal export

        Returns:
            Cleaned text
        """
        if not text:
            return ""

        text = TextNormalizer._normalize_characters(text)

        text = TextNormalizer.ISOLATED_BULLET.sub('', text)
        text = TextNormalizer.DASH_BULLET.sub(f'{TextNormalizer.CANONICAL_BULLET} ', text)
        text = TextNormalizer.SEPARATOR_LINE.sub('', text)
        text = TextNormalizer.EXCESS_NEWLINES.sub('\n\n', text)
        text = TextNormalizer.TRAILING_WHITESPACE.sub('', text)

        return text.strip()

    @staticmethod
    def _normalize_characters(text: str) -> str:
        """Unify line endings and replace problematic Unicode spaces"""
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        for unicode_char, replacement in TextNormalizer.UNICODE_REPLACEMENTS.items():
            text = text.replace(unicode_char, replacement)
        return text


def clean_text(text: str) -> str:
    """Convenience function for text normalization"""
    return TextNormalizer.clean(text)
