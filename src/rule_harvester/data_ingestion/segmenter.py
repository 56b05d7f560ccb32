"""
Paragraph Segmenter Module
Splits raw document text into the paragraphs processed one at a time.
"""

import re
from typing import List, Optional

# A run of whitespace that contains at least two newlines
PARAGRAPH_BREAK = re.compile(r'\n\s*\n')


def segment(text: Optional[str]) -> List[str]:
    """Split text into trimmed, non-empty, blank-line separated paragraphs.

    Args:
        text: Raw document text

    Returns:
        List[str]: Paragraphs in document order; empty for blank input
    """
    if not text:
        return []

    blocks = PARAGRAPH_BREAK.split(text)
    return [block.strip() for block in blocks if block.strip()]
