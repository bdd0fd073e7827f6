"""Ingest raw JSON-lines records into period-tagged Parquet for the analytics jobs."""

import argparse
import logging

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import col, lit, spark_partition_id, trim, udf
from pyspark.sql.types import StringType

from null_safe import month_period
from pipeline_config import BUCKET_NAME, INGESTED_PREFIX, RAW_PREFIX, build_spark_session, configure_logging

logger = logging.getLogger(__name__)

period_udf = udf(month_period, StringType())


def ingest_records(raw_df: DataFrame, text_field: str, timestamp_field: str, group_field: str = None) -> DataFrame:
    """Normalize raw records to (text, period, group_key), dropping unusable ones."""
    group_expr = col(group_field).cast("string") if group_field else lit("all")
    return raw_df.select(
        col(text_field).cast("string").alias("text"),
        period_udf(col(timestamp_field).cast("string")).alias("period"),
        group_expr.alias("group_key")
    ).filter(
        col("text").isNotNull() & (trim(col("text")) != "") & col("period").isNotNull()
    ).fillna({"group_key": "unknown"})


def run(spark: SparkSession, input_path: str, output_path: str, text_field: str,
        timestamp_field: str, group_field: str = None) -> int:
    raw_df = spark.read.option("multiLine", False).json(input_path)
    raw_count = raw_df.count()
    records = ingest_records(raw_df, text_field, timestamp_field, group_field)
    records.write.mode("overwrite").partitionBy("period").parquet(output_path)

    record_count = records.count()
    partition_count = records.select(spark_partition_id()).distinct().count()
    logger.info(f"Total records ingested: {record_count}")
    if raw_count > record_count:
        logger.warning(f"Dropped {raw_count - record_count} records with missing text or unparseable timestamps")
    logger.info(f"Number of partitions: {partition_count}")
    return record_count


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Ingest raw records into period-tagged Parquet")
    parser.add_argument("--input", default=f"s3://{BUCKET_NAME}/{RAW_PREFIX}")
    parser.add_argument("--output", default=f"s3://{BUCKET_NAME}/{INGESTED_PREFIX}")
    parser.add_argument("--text-field", default="text")
    parser.add_argument("--timestamp-field", default="timestamp")
    parser.add_argument("--group-field", default=None)
    return parser.parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    spark = build_spark_session("RecordIngestion")

    try:
        run(spark, args.input, args.output, args.text_field, args.timestamp_field, args.group_field)
    except Exception as e:
        logger.error(f"Error during data ingestion: {e}")
        raise
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
