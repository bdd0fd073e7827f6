"""Shared constants and Spark session setup for the analytics jobs."""

import logging
import os

from pyspark.sql import SparkSession

# S3 layout
BUCKET_NAME = os.getenv("ANALYTICS_BUCKET", "analytics-pipelines-bucket")
RAW_PREFIX = os.getenv("RAW_PREFIX", "raw/")
INGESTED_PREFIX = os.getenv("INGESTED_PREFIX", "ingested_records/")
TRENDING_PREFIX = os.getenv("TRENDING_PREFIX", "trending_results/")
SENTIMENT_PREFIX = os.getenv("SENTIMENT_PREFIX", "sentiment_results/")
WEBLOG_PREFIX = os.getenv("WEBLOG_PREFIX", "weblog_results/")
ASSOCIATIONS_PREFIX = os.getenv("ASSOCIATIONS_PREFIX", "association_results/")
METRICS_PATH = "results/metrics/"
PLOT_PATH = "results/plots/"
JSON_PATH = "results/json/"

# Core defaults
DEFAULT_MIN_WORD_LENGTH = 5
DEFAULT_MIN_CORPUS_FREQUENCY = 0.0000005
DEFAULT_MAX_ASSOCIATIONS = 100
DEFAULT_TOP_TRENDING = 10
DEFAULT_TOP_URIS = 25
VELOCITY_SCALE = 1000000.0

SHUFFLE_PARTITIONS = int(os.getenv("SHUFFLE_PARTITIONS", "400"))


def configure_logging(level: int = logging.INFO):
    """Configure root logging for a job entry point."""
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')
    logging.getLogger('py4j').setLevel(logging.WARNING)


def build_spark_session(app_name: str) -> SparkSession:
    """Create (or reuse) the Spark session used by a batch job."""
    return SparkSession.builder \
        .appName(app_name) \
        .config("spark.sql.shuffle.partitions", SHUFFLE_PARTITIONS) \
        .config("spark.executor.cores", os.getenv("SPARK_EXECUTOR_CORES", "4")) \
        .config("spark.executor.memory", os.getenv("SPARK_EXECUTOR_MEMORY", "8g")) \
        .config("spark.driver.memory", os.getenv("SPARK_DRIVER_MEMORY", "8g")) \
        .config("spark.hadoop.fs.s3a.fast.upload", "true") \
        .config("spark.network.timeout", "600s") \
        .config("spark.executor.heartbeatInterval", "60s") \
        .getOrCreate()
