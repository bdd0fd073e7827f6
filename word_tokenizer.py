"""Lowercase, punctuation-stripped word tokens for the frequency and sentiment jobs."""

import re
from typing import List, Optional

from pyspark.sql.functions import udf
from pyspark.sql.types import ArrayType, StringType

from pipeline_config import DEFAULT_MIN_WORD_LENGTH

# Leading/trailing characters that are neither letters nor apostrophes
_EDGE_PUNCTUATION = re.compile(r"^[^a-z']+|[^a-z']+$")
_WORD = re.compile(r"^[a-z']+$")


def tokenize(text: Optional[str], min_length: int = DEFAULT_MIN_WORD_LENGTH) -> List[str]:
    """Split text into lowercase alphabetic tokens of at least `min_length` characters."""
    if min_length < 1:
        raise ValueError(f"min_length must be at least 1, got {min_length}")
    if not text:
        return []
    tokens = []
    for raw in text.lower().split():
        word = _EDGE_PUNCTUATION.sub("", raw)
        if not word or not _WORD.match(word):
            continue
        if len(word) < min_length:
            continue
        tokens.append(word)
    return tokens


def tokenize_udf(min_length: int = DEFAULT_MIN_WORD_LENGTH):
    """Spark UDF producing array<string> tokens for a text column."""
    if min_length < 1:
        raise ValueError(f"min_length must be at least 1, got {min_length}")
    return udf(lambda text: tokenize(text, min_length), ArrayType(StringType()))
