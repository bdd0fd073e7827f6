"""
Month-over-month word velocity for trending-topic detection.

Each word's chronological (period, frequency) series is turned into one
VelocityRecord per point. A point whose predecessor is not the immediately
preceding calendar month is compared against an absent month: its absolute
velocity is its own frequency and its relative velocity is pinned to 1.0.

combined_velocity = scale * absolute * relative * (-1 if absolute < 0 else 1)

Only records with combined_velocity > 0 are treated as trending.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pyspark.sql.functions import udf
from pyspark.sql.types import ArrayType, DoubleType, StringType, StructField, StructType

from pipeline_config import VELOCITY_SCALE

logger = logging.getLogger(__name__)

ABSENT_PREDECESSOR_RELATIVE_VELOCITY = 1.0


@dataclass(frozen=True)
class VelocityRecord:
    word: str
    period: str
    frequency: float
    absolute_velocity: float
    relative_velocity: Optional[float]
    combined_velocity: Optional[float]


def _month_index(period: str) -> Optional[int]:
    try:
        year, month = period.split("-")[:2]
        year, month = int(year), int(month)
    except (AttributeError, ValueError):
        return None
    if not 1 <= month <= 12:
        return None
    return year * 12 + (month - 1)


def is_next_month(previous: Optional[str], current: str) -> bool:
    """True when `current` is the calendar month right after `previous`."""
    if previous is None:
        return False
    prev_index, cur_index = _month_index(previous), _month_index(current)
    if prev_index is None or cur_index is None:
        return False
    return cur_index - prev_index == 1


def relative_velocity(previous: float, current: float) -> Optional[float]:
    """Signed square-root ratio of change; None unless both frequencies are positive."""
    if not (previous > 0 and current > 0):
        return None
    ratio = abs(1 + (current - previous) / previous)
    if current >= previous:
        return math.sqrt(ratio)
    return -math.sqrt(1 / ratio)


def combined_velocity(absolute: float, relative: Optional[float], scale: float = VELOCITY_SCALE) -> Optional[float]:
    if relative is None:
        return None
    return scale * absolute * relative * (-1 if absolute < 0 else 1)


def velocity_records(word: str, series: Sequence[Tuple[str, float]],
                     scale: float = VELOCITY_SCALE) -> List[VelocityRecord]:
    """One VelocityRecord per (period, frequency) point, in series order."""
    records = []
    previous_period, previous_frequency = None, None
    for period, frequency in series:
        if is_next_month(previous_period, period):
            absolute = frequency - previous_frequency
            relative = relative_velocity(previous_frequency, frequency)
        else:
            absolute = frequency
            relative = ABSENT_PREDECESSOR_RELATIVE_VELOCITY
        records.append(VelocityRecord(
            word=word,
            period=period,
            frequency=frequency,
            absolute_velocity=absolute,
            relative_velocity=relative,
            combined_velocity=combined_velocity(absolute, relative, scale),
        ))
        previous_period, previous_frequency = period, frequency
    return records


def compute_velocities(series_by_word: Dict[str, Sequence[Tuple[str, float]]],
                       scale: float = VELOCITY_SCALE) -> List[VelocityRecord]:
    """Flatten velocity records for every word."""
    records = []
    for word, series in series_by_word.items():
        records.extend(velocity_records(word, series, scale))
    return records


def trending_records(records: Iterable[VelocityRecord]) -> List[VelocityRecord]:
    """Keep records trending upward (combined velocity defined and > 0)."""
    return [r for r in records if r.combined_velocity is not None and r.combined_velocity > 0]


VELOCITY_SCHEMA = ArrayType(StructType([
    StructField("period", StringType(), False),
    StructField("frequency", DoubleType(), False),
    StructField("absolute_velocity", DoubleType(), False),
    StructField("relative_velocity", DoubleType(), True),
    StructField("combined_velocity", DoubleType(), True),
]))


def _velocity_rows(word, series):
    """UDF body: series is a period-sorted array of (period, frequency) structs."""
    if word is None or series is None:
        return None
    points = [(point["period"], float(point["frequency"])) for point in series]
    rows = []
    for record in velocity_records(word, points):
        row = asdict(record)
        del row["word"]
        rows.append(row)
    return rows


velocity_udf = udf(_velocity_rows, VELOCITY_SCHEMA)
