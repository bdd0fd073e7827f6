"""Daily web-log summary: request and byte totals plus the top URIs per day."""

import argparse
import logging
import re
import time
from typing import Dict, Optional

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import col, count, sum as spark_sum, udf
from pyspark.sql.types import IntegerType, LongType, StringType, StructField, StructType

from null_safe import day_period, null_safe
from pipeline_config import (BUCKET_NAME, DEFAULT_TOP_URIS, JSON_PATH, METRICS_PATH, RAW_PREFIX, WEBLOG_PREFIX,
                             build_spark_session, configure_logging)
from run_metrics import finalize_metrics, stage_timer
from s3_io import save_json_to_s3
from top_k import spark_group_top_k

logger = logging.getLogger(__name__)

# Common and Combined Log Format
LOG_PATTERN = re.compile(
    r'^(?P<host>\S+) \S+ (?P<user>\S+) \[(?P<timestamp>[^\]]+)\] '
    r'"(?P<method>[A-Z]+) (?P<uri>\S+)(?: (?P<protocol>[^"]*))?" '
    r'(?P<status>\d{3}) (?P<bytes>\d+|-)'
    r'(?: "(?P<referrer>[^"]*)" "(?P<agent>[^"]*)")?'
)

# Sort field selector -> aggregate column
SORT_FIELDS = {
    "count": "requests",
    "bytes": "bytes",
}

LOG_SCHEMA = StructType([
    StructField("host", StringType(), False),
    StructField("date", StringType(), False),
    StructField("method", StringType(), False),
    StructField("uri", StringType(), False),
    StructField("status", IntegerType(), False),
    StructField("bytes", LongType(), False),
])


def sort_column(sort_field: str) -> str:
    try:
        return SORT_FIELDS[sort_field]
    except KeyError:
        raise ValueError(f"Unknown sort field {sort_field!r}; expected one of {sorted(SORT_FIELDS)}") from None


@null_safe
def parse_log_line(line: str) -> Optional[Dict]:
    """Parse one access-log line; malformed lines and bad timestamps yield None."""
    match = LOG_PATTERN.match(line.strip())
    if not match:
        return None
    date = day_period(match.group("timestamp"))
    if date is None:
        return None
    size = match.group("bytes")
    return {
        "host": match.group("host"),
        "date": date,
        "method": match.group("method"),
        "uri": match.group("uri"),
        "status": int(match.group("status")),
        "bytes": 0 if size == "-" else int(size),
    }


parse_log_udf = udf(parse_log_line, LOG_SCHEMA)


def parse_logs(lines: DataFrame) -> DataFrame:
    """Text lines (`value` column) to parsed request rows."""
    return lines.select(parse_log_udf(col("value")).alias("request")) \
                .filter(col("request").isNotNull()) \
                .select("request.*")


def daily_report(requests: DataFrame, sort_field: str = "count", top_n: int = DEFAULT_TOP_URIS) -> DataFrame:
    """Per date: total requests, total bytes and the top URIs by `sort_field`."""
    metric = sort_column(sort_field)
    totals = requests.groupBy("date").agg(count("*").alias("total_requests"),
                                          spark_sum("bytes").alias("total_bytes"))
    per_uri = requests.groupBy("date", "uri").agg(count("*").alias("requests"),
                                                  spark_sum("bytes").alias("bytes"))
    other = "bytes" if metric == "requests" else "requests"
    top_uris = spark_group_top_k(per_uri, "date", metric, top_n, item_cols=["uri", metric, other],
                                 order_col="uri")
    return totals.join(top_uris, on="date", how="left").orderBy("date")


def run(spark: SparkSession, input_path: str, output_path: str, sort_field: str = "count",
        top_n: int = DEFAULT_TOP_URIS):
    sort_column(sort_field)
    start = time.time()
    metrics = {"sort_field": sort_field, "top_n": top_n}

    with stage_timer(metrics, "parse"):
        lines = spark.read.text(input_path)
        metrics["total_records"] = lines.count()
        requests = parse_logs(lines).cache()
        metrics["parsed_records"] = requests.count()
    dropped = metrics["total_records"] - metrics["parsed_records"]
    if dropped:
        logger.warning(f"Skipped {dropped} malformed log lines")

    with stage_timer(metrics, "report"):
        report = daily_report(requests, sort_field, top_n).cache()
        report.write.mode("overwrite").json(output_path)

    rows = [row.asDict(recursive=True) for row in report.collect()]
    save_json_to_s3(rows, f"{JSON_PATH}weblog_report_by_{sort_field}.json")
    logger.info(f"Web-log report for {len(rows)} days written to {output_path}")

    finalize_metrics(metrics, start)
    save_json_to_s3(metrics, f"{METRICS_PATH}weblog_metrics.json")
    return rows


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Daily web-log totals and top URIs")
    parser.add_argument("--input", default=f"s3://{BUCKET_NAME}/{RAW_PREFIX}logs/")
    parser.add_argument("--output", default=f"s3://{BUCKET_NAME}/{WEBLOG_PREFIX}")
    parser.add_argument("--sort-field", choices=sorted(SORT_FIELDS), default="count")
    parser.add_argument("--top-n", type=int, default=DEFAULT_TOP_URIS)
    return parser.parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    spark = build_spark_session("WebLogReport")

    try:
        run(spark, args.input, args.output, args.sort_field, args.top_n)
    except Exception as e:
        logger.error(f"Error during web-log aggregation: {e}")
        raise
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
