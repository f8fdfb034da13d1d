"""
GitHub Comment Formatter

Formats review text as a PR comment body with a header naming
the reviewed file.
"""

import logging


logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 65536  # GitHub's comment limit
TRUNCATION_MARKER = "\n\n_(review truncated)_"


def format_review_comment(filename: str, review: str, max_length: int = MAX_COMMENT_LENGTH) -> str:
    """
    Build the comment body for one reviewed file.

    Args:
        filename: Path of the reviewed file, as listed in the PR
        review: Raw review text returned by the model
        max_length: Maximum body length accepted by GitHub

    Returns:
        Comment body starting with ``Code Review for `<filename>`:``
    """
    header = f"Code Review for `{filename}`:\n"
    body = header + review

    if len(body) > max_length:
        logger.warning(f"Review for {filename} exceeds {max_length} characters, truncating")
        keep = max(max_length - len(header) - len(TRUNCATION_MARKER), 0)
        body = header + review[:keep] + TRUNCATION_MARKER

    return body
