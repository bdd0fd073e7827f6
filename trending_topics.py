"""Rank trending words per month by month-over-month frequency velocity."""

import argparse
import logging
import time

import pandas as pd
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import col, collect_list, explode, sort_array, struct

from period_frequency import spark_period_frequencies
from plots import ranked_bar_chart, save_chart
from pipeline_config import (BUCKET_NAME, DEFAULT_MIN_WORD_LENGTH, DEFAULT_TOP_TRENDING, INGESTED_PREFIX,
                             JSON_PATH, METRICS_PATH, TRENDING_PREFIX, build_spark_session, configure_logging)
from run_metrics import finalize_metrics, stage_timer
from s3_io import save_json_to_s3
from top_k import spark_group_top_k
from trend_velocity import velocity_udf
from word_tokenizer import tokenize_udf

logger = logging.getLogger(__name__)

TRENDING_ITEM_COLS = ["word", "frequency", "absolute_velocity", "relative_velocity", "combined_velocity"]


def period_words(records: DataFrame, min_length: int = DEFAULT_MIN_WORD_LENGTH) -> DataFrame:
    """One (period, word) row per token."""
    tokens = tokenize_udf(min_length)
    return records.filter(col("text").isNotNull() & col("period").isNotNull()) \
                  .select(col("period").cast("string").alias("period"),
                          explode(tokens(col("text"))).alias("word"))


def word_velocities(frequencies: DataFrame) -> DataFrame:
    """Per-word velocity records from (word, period, frequency) rows."""
    series = frequencies.groupBy("word").agg(
        sort_array(collect_list(struct("period", "frequency"))).alias("series")
    )
    return series.select("word", explode(velocity_udf(col("word"), col("series"))).alias("v")) \
                 .select("word", "v.*")


def trending_by_period(records: DataFrame, top_n: int = DEFAULT_TOP_TRENDING,
                       min_length: int = DEFAULT_MIN_WORD_LENGTH) -> DataFrame:
    """Top `top_n` upward-trending words per period."""
    frequencies = spark_period_frequencies(period_words(records, min_length))
    velocities = word_velocities(frequencies)
    trending = velocities.filter(col("combined_velocity").isNotNull() & (col("combined_velocity") > 0))
    # Ties within a period rank alphabetically
    return spark_group_top_k(trending, "period", "combined_velocity", top_n,
                             item_cols=TRENDING_ITEM_COLS, order_col="word", collect=False)


def summarize(ranked: DataFrame):
    """Collect ranked rows into {period: [{rank, word, ...}, ...]} for the JSON export."""
    summary = {}
    for row in ranked.orderBy("period", "rank").collect():
        entry = row.asDict()
        summary.setdefault(entry.pop("period"), []).append(entry)
    return summary


def plot_latest_period(summary):
    """Chart the trending words of the most recent period."""
    if not summary:
        logger.warning("No trending words to plot")
        return
    latest = max(summary)
    df = pd.DataFrame(summary[latest])
    fig = ranked_bar_chart(df, "word", "combined_velocity", f"Trending Words for {latest}")
    save_chart(fig, f"trending_words_{latest}")


def run(spark: SparkSession, input_path: str, output_path: str, top_n: int = DEFAULT_TOP_TRENDING,
        min_length: int = DEFAULT_MIN_WORD_LENGTH, plot: bool = False):
    logger.info(f"Computing top {top_n} trending words per period from {input_path}")
    start = time.time()
    metrics = {"top_n": top_n, "min_word_length": min_length}

    with stage_timer(metrics, "read"):
        records = spark.read.parquet(input_path).cache()
        metrics["total_records"] = records.count()
    logger.info(f"Read {metrics['total_records']} records in {metrics['read_time_seconds']:.2f} seconds")

    with stage_timer(metrics, "trending"):
        ranked = trending_by_period(records, top_n, min_length).cache()
        ranked.write.mode("overwrite").parquet(output_path)
    logger.info(f"Trending words written to {output_path}")

    summary = summarize(ranked)
    metrics["periods"] = len(summary)
    save_json_to_s3(summary, f"{JSON_PATH}trending_words.json")
    if plot:
        plot_latest_period(summary)

    finalize_metrics(metrics, start)
    save_json_to_s3(metrics, f"{METRICS_PATH}trending_metrics.json")
    return summary


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Month-over-month trending word ranking")
    parser.add_argument("--input", default=f"s3://{BUCKET_NAME}/{INGESTED_PREFIX}")
    parser.add_argument("--output", default=f"s3://{BUCKET_NAME}/{TRENDING_PREFIX}")
    parser.add_argument("--top-n", type=int, default=DEFAULT_TOP_TRENDING)
    parser.add_argument("--min-word-length", type=int, default=DEFAULT_MIN_WORD_LENGTH)
    parser.add_argument("--plot", action="store_true", help="Upload a chart of the latest period")
    return parser.parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    spark = build_spark_session("TrendingTopics")

    try:
        run(spark, args.input, args.output, args.top_n, args.min_word_length, args.plot)
    except Exception as e:
        logger.error(f"Error during trending topic analysis: {e}")
        raise
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
