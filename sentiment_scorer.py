"""Lexicon sentiment scoring with intensifier and negation handling."""

import logging
from typing import Optional, Sequence, Union

from pyspark.sql.functions import udf
from pyspark.sql.types import DoubleType, StringType, StructField, StructType

from null_safe import null_safe
from sentiment_lexicon import word_set
from word_tokenizer import tokenize

logger = logging.getLogger(__name__)

SENTIMENT_MIN_WORD_LENGTH = 1


def _match_polarity(token: str) -> float:
    if token in word_set("positive"):
        return 1.0
    if token in word_set("negative"):
        return -1.0
    return 0.0


def score_tokens(tokens: Sequence[str]) -> float:
    """Sum the signed contribution of every polarity word in `tokens`.

    Modifiers directly before a polarity word are read backwards: each
    intensifier adds 1.0 to its magnitude, each negation bumps a counter.
    The walk stops at the first token that is neither. With n > 0
    negations the contribution is multiplied by (-0.5) ** n.
    """
    intensifiers, negations = word_set("intensifier"), word_set("negation")
    score = 0.0
    for i, token in enumerate(tokens):
        polarity = _match_polarity(token)
        if polarity == 0.0:
            continue
        magnitude = 1.0
        negation_count = 0
        j = i - 1
        while j >= 0:
            if tokens[j] in intensifiers:
                magnitude += 1.0
            elif tokens[j] in negations:
                negation_count += 1
            else:
                break
            j -= 1
        contribution = polarity * magnitude
        if negation_count > 0:
            # Odd counts flip the sign, even counts keep it; both dampen
            contribution *= (-0.5) ** negation_count
        score += contribution
    return score


@null_safe
def score_text(text: str, min_length: int = SENTIMENT_MIN_WORD_LENGTH) -> Optional[float]:
    """Tokenize and score raw text. None text yields None."""
    return score_tokens(tokenize(text, min_length))


def classify(score: Union[float, None]) -> Optional[str]:
    if score is None:
        return None
    if score > 0:
        return "positive"
    if score < 0:
        return "negative"
    return "neutral"


def map_sentiment_udf(text: Union[str, None]):
    """Score a text column value; None/blank text yields no result."""
    if not isinstance(text, str) or not text.strip():
        return None
    score = score_text(text)
    return (score, classify(score))


sentiment_udf = udf(
    map_sentiment_udf,
    StructType([
        StructField("score", DoubleType(), False),
        StructField("category", StringType(), False)
    ])
)
