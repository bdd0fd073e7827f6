"""Grouped top-K selection shared by every ranked report."""

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

from pyspark.sql import DataFrame, Window
from pyspark.sql import functions as F

KeyFunc = Callable[[Any], Any]


@dataclass(frozen=True)
class RankedResult:
    group_key: Hashable
    items: Tuple[Any, ...]


def _key_func(key: Union[str, KeyFunc]) -> KeyFunc:
    if callable(key):
        return key
    # Field name: works for dicts, Rows and dataclasses alike
    def getter(item):
        if isinstance(item, dict):
            return item[key]
        return getattr(item, key)
    return getter


def _check_n(n: int):
    if n < 0:
        raise ValueError(f"top-K size must be non-negative, got {n}")


def top_k(items: Iterable[Any], key: Union[str, KeyFunc], n: int) -> List[Any]:
    """The `n` highest items by `key`, descending; equal scores keep input order.

    Items whose key is None are not ranked. The input is never reordered.
    """
    _check_n(n)
    score = _key_func(key)
    scored = [item for item in items if score(item) is not None]
    # sorted() with reverse=True is stable, so ties stay in input order
    return sorted(scored, key=score, reverse=True)[:n]


def group_top_k(items: Iterable[Any], group_key: Union[str, KeyFunc],
                key: Union[str, KeyFunc], n: int) -> List[RankedResult]:
    """Group items, then keep the top `n` of each group. Groups come out in first-seen order."""
    _check_n(n)
    group_of = _key_func(group_key)
    groups = {}
    for item in items:
        groups.setdefault(group_of(item), []).append(item)
    return [RankedResult(group, tuple(top_k(members, key, n))) for group, members in groups.items()]


def spark_group_top_k(df: DataFrame, group_col: Union[str, Sequence[str]], sort_col: str, n: int,
                      item_cols: Optional[Sequence[str]] = None, order_col: Optional[str] = None,
                      collect: bool = True) -> DataFrame:
    """Spark top-K per group.

    Ties on `sort_col` are broken by `order_col`, or by row position when no
    order column is given. With `collect=True` the result has one row per
    group holding a `top_items` array ordered by rank; otherwise the ranked
    rows are returned with a `rank` column.
    """
    _check_n(n)
    group_cols = [group_col] if isinstance(group_col, str) else list(group_col)
    if order_col is None:
        order_col = "_input_order"
        df = df.withColumn(order_col, F.monotonically_increasing_id())
    window = Window.partitionBy(*group_cols).orderBy(F.col(sort_col).desc(), F.col(order_col).asc())
    ranked = df.filter(F.col(sort_col).isNotNull()) \
               .withColumn("rank", F.row_number().over(window)) \
               .filter(F.col("rank") <= n)
    if item_cols is None:
        item_cols = [c for c in df.columns if c not in group_cols and c != "_input_order"]
    if not collect:
        return ranked.select(*group_cols, "rank", *item_cols)
    # sort_array orders structs by their first field, the rank
    return ranked.groupBy(*group_cols) \
                 .agg(F.sort_array(F.collect_list(F.struct("rank", *item_cols))).alias("top_items"))
