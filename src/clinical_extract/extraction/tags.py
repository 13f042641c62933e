"""
Tag Content Extraction

Locates content inside ``<TAG> ... </TAG>`` delimiter pairs.
"""

import re


def extract_tag(text: str | None, tag_name: str) -> str | None:
    """
    Return the trimmed content of the first ``<tag_name>`` pair in ``text``.

    Matching is case-insensitive and non-greedy. Returns None when the pair is
    missing or its content is empty after trimming.

    Example:
        extract_tag("<DATE>\\n Mar 2024 \\n</DATE>", "DATE")  # "Mar 2024"
    """
    if not text or not isinstance(text, str) or not tag_name:
        return None

    name = re.escape(tag_name)
    pattern = rf"<{name}>\s*(.*?)\s*</{name}>"
    match = re.search(pattern, text, re.IGNORECASE | re.DOTALL)
    if not match:
        return None

    content = match.group(1).strip()
    return content or None
