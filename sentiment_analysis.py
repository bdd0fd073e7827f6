"""Lexicon sentiment scores per record, summarized per group."""

import argparse
import logging
import time
from typing import Dict, List, Tuple

import pandas as pd
import plotly.graph_objects as go
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import avg, col, count

from pipeline_config import (BUCKET_NAME, INGESTED_PREFIX, JSON_PATH, METRICS_PATH, SENTIMENT_PREFIX,
                             build_spark_session, configure_logging)
from plots import save_chart
from run_metrics import finalize_metrics, stage_timer
from s3_io import save_json_to_s3
from sentiment_scorer import sentiment_udf
from top_k import spark_group_top_k

logger = logging.getLogger(__name__)

DEFAULT_TOP_RECORDS = 10


def score_records(records: DataFrame) -> DataFrame:
    """Attach score and category; records without usable text are dropped."""
    return records.select(
        col("text"),
        col("period"),
        col("group_key"),
        sentiment_udf(col("text")).alias("sentiment")
    ).filter(col("sentiment").isNotNull()) \
     .select("text", "period", "group_key",
             col("sentiment.score").alias("score"),
             col("sentiment.category").alias("category"))


def group_summary(scored: DataFrame) -> DataFrame:
    """Average score and category counts per group key."""
    counts = scored.groupBy("group_key").pivot("category", ["positive", "neutral", "negative"]).count() \
                   .fillna(0)
    averages = scored.groupBy("group_key").agg(avg("score").alias("avg_score"), count("*").alias("records"))
    return averages.join(counts, on="group_key", how="left")


def most_positive(scored: DataFrame, top_n: int = DEFAULT_TOP_RECORDS) -> DataFrame:
    return spark_group_top_k(scored, "group_key", "score", top_n, item_cols=["score", "period", "text"])


def plot_sentiment_categories(category_counts: List[Tuple[str, int]]):
    """Pie chart of sentiment category counts across all records."""
    df = pd.DataFrame(category_counts, columns=['category', 'count'])
    colors = ['#2ca02c', '#1f77b4', '#d62728']
    fig = go.Figure([go.Pie(
        labels=df['category'],
        values=df['count'],
        textinfo='label+percent',
        textposition='inside',
        marker=dict(colors=colors[:len(df)], line=dict(color='black', width=1.5)),
        opacity=0.85
    )])
    fig.update_layout(
        title="Sentiment Categories",
        title_x=0.5,
        height=600,
        width=800,
        font=dict(family="Arial, sans-serif", size=16, color="black"),
        paper_bgcolor='white',
        legend=dict(title="Sentiment Categories", font=dict(size=14)),
        margin=dict(l=50, r=50, t=100, b=100)
    )
    save_chart(fig, "sentiment_categories")


def run(spark: SparkSession, input_path: str, output_path: str, top_n: int = DEFAULT_TOP_RECORDS,
        plot: bool = False) -> Dict:
    start = time.time()
    metrics = {"top_n": top_n}

    with stage_timer(metrics, "read"):
        records = spark.read.parquet(input_path).cache()
        metrics["total_records"] = records.count()

    with stage_timer(metrics, "sentiment"):
        scored = score_records(records).cache()
        scored.write.mode("overwrite").parquet(f"{output_path}scored/")
        summary = group_summary(scored)
        summary.write.mode("overwrite").parquet(f"{output_path}summary/")
        most_positive(scored, top_n).write.mode("overwrite").parquet(f"{output_path}most_positive/")

    avg_sentiment = scored.selectExpr("avg(score)").collect()[0][0] or 0.0
    category_counts = [(row["category"], row["count"]) for row in scored.groupBy("category").count().collect()]
    metrics["avg_sentiment"] = avg_sentiment
    for category, n in category_counts:
        metrics[f"{category}_count"] = n
    logger.info(f"Average sentiment {avg_sentiment:.4f} across {metrics['total_records']} records")

    groups = {row["group_key"]: row.asDict() for row in summary.collect()}
    save_json_to_s3(groups, f"{JSON_PATH}sentiment_by_group.json")
    if plot and category_counts:
        plot_sentiment_categories(category_counts)

    finalize_metrics(metrics, start)
    save_json_to_s3(metrics, f"{METRICS_PATH}sentiment_metrics.json")
    return groups


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Lexicon sentiment scoring per group")
    parser.add_argument("--input", default=f"s3://{BUCKET_NAME}/{INGESTED_PREFIX}")
    parser.add_argument("--output", default=f"s3://{BUCKET_NAME}/{SENTIMENT_PREFIX}")
    parser.add_argument("--top-n", type=int, default=DEFAULT_TOP_RECORDS)
    parser.add_argument("--plot", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    spark = build_spark_session("SentimentAnalysis")

    try:
        run(spark, args.input, args.output, args.top_n, args.plot)
    except Exception as e:
        logger.error(f"Error during sentiment analysis: {e}")
        raise
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
