"""
Local text measurements that do not depend on the feedback service.
"""
import math

# Assumed speaking rate for spoken interview answers
WORDS_PER_MINUTE = 150


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens."""
    return len(text.split()) if text else 0


def estimate_duration_seconds(word_count: int) -> int:
    """Seconds needed to deliver ``word_count`` words at WORDS_PER_MINUTE."""
    return math.ceil(word_count / WORDS_PER_MINUTE * 60)
