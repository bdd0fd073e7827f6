"""Per-period word counts and frequencies.

Counts are grouped on the exact (word, period) pair; a word's frequency in a
period is its occurrences divided by every token counted in that period.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from pyspark.sql import DataFrame
from pyspark.sql import functions as F

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordPeriodCount:
    word: str
    period: str
    occurrences: int


@dataclass(frozen=True)
class WordPeriodFrequency:
    word: str
    period: str
    frequency: float


# Chronological sequence of (period, frequency) for one word
WordTimeSeries = Tuple[Tuple[str, float], ...]


def count_word_periods(pairs: Iterable[Tuple[str, str]]) -> List[WordPeriodCount]:
    """Count (period, word) pairs; records keep first-seen order."""
    counts = Counter()
    for period, word in pairs:
        if period is None or word is None:
            continue
        counts[(word, period)] += 1
    return [WordPeriodCount(word, period, n) for (word, period), n in counts.items()]


def period_totals(counts: Iterable[WordPeriodCount]) -> Dict[str, int]:
    """Total token occurrences per period."""
    totals = defaultdict(int)
    for count in counts:
        totals[count.period] += count.occurrences
    return dict(totals)


def period_frequencies(counts: Iterable[WordPeriodCount]) -> List[WordPeriodFrequency]:
    """Convert counts to frequencies, skipping periods with no tokens."""
    counts = list(counts)
    totals = period_totals(counts)
    for period, total in totals.items():
        if total == 0:
            logger.warning(f"Skipping period {period}: zero tokens counted")
    return [
        WordPeriodFrequency(count.word, count.period, count.occurrences / totals[count.period])
        for count in counts
        if totals[count.period] > 0
    ]


def build_time_series(frequencies: Iterable[WordPeriodFrequency]) -> Dict[str, WordTimeSeries]:
    """Group frequencies by word into period-ordered series."""
    by_word = defaultdict(list)
    for record in frequencies:
        by_word[record.word].append((record.period, record.frequency))
    return {word: tuple(sorted(points)) for word, points in by_word.items()}


def aggregate(pairs: Iterable[Tuple[str, str]]) -> Dict[str, WordTimeSeries]:
    """(period, word) pairs straight to per-word time series."""
    return build_time_series(period_frequencies(count_word_periods(pairs)))


def spark_period_frequencies(words_df: DataFrame, period_col: str = "period", word_col: str = "word") -> DataFrame:
    """Spark version: (period, word) rows to (word, period, occurrences, period_total, frequency).

    Occurrences come from groupBy().count(), so every surviving period has a
    total of at least 1; the period_total > 0 filter only guards the division
    and never drops a period, hence nothing to log here.
    """
    counts = words_df.filter(F.col(period_col).isNotNull() & F.col(word_col).isNotNull()) \
                     .groupBy(word_col, period_col).count() \
                     .withColumnRenamed("count", "occurrences")
    totals = counts.groupBy(period_col).agg(F.sum("occurrences").alias("period_total")) \
                   .filter(F.col("period_total") > 0)
    return counts.join(totals, on=period_col, how="inner") \
                 .withColumn("frequency", F.col("occurrences") / F.col("period_total")) \
                 .select(word_col, period_col, "occurrences", "period_total", "frequency")
