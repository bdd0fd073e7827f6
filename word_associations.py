"""Words that most often share a record with each sufficiently common word."""

import argparse
import logging
import time

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import array_distinct, col, count, explode, lit, monotonically_increasing_id

from pipeline_config import (ASSOCIATIONS_PREFIX, BUCKET_NAME, DEFAULT_MAX_ASSOCIATIONS,
                             DEFAULT_MIN_CORPUS_FREQUENCY, DEFAULT_MIN_WORD_LENGTH, INGESTED_PREFIX,
                             METRICS_PATH, build_spark_session, configure_logging)
from run_metrics import finalize_metrics, stage_timer
from s3_io import save_json_to_s3
from top_k import spark_group_top_k
from word_tokenizer import tokenize_udf

logger = logging.getLogger(__name__)


def corpus_frequencies(words: DataFrame) -> DataFrame:
    """(word, occurrences, corpus_frequency) over every token in `words`."""
    total = words.count()
    if total == 0:
        logger.warning("Corpus has no tokens; no corpus frequencies computed")
        return words.groupBy("word").agg(count("*").alias("occurrences")) \
                    .withColumn("corpus_frequency", lit(0.0)).limit(0)
    return words.groupBy("word").agg(count("*").alias("occurrences")) \
                .withColumn("corpus_frequency", col("occurrences") / lit(float(total)))


def word_associations(records: DataFrame, min_frequency: float = DEFAULT_MIN_CORPUS_FREQUENCY,
                      max_associations: int = DEFAULT_MAX_ASSOCIATIONS,
                      min_length: int = DEFAULT_MIN_WORD_LENGTH) -> DataFrame:
    """Top `max_associations` co-occurring words per word, by number of shared records."""
    if max_associations < 0:
        raise ValueError(f"max_associations must be non-negative, got {max_associations}")
    tokens = tokenize_udf(min_length)
    docs = records.filter(col("text").isNotNull()) \
                  .select(monotonically_increasing_id().alias("doc_id"), tokens(col("text")).alias("words")).cache()
    words = docs.select("doc_id", explode(col("words")).alias("word")).cache()

    common = corpus_frequencies(words).filter(col("corpus_frequency") >= min_frequency).select("word")
    doc_words = docs.select("doc_id", explode(array_distinct(col("words"))).alias("word")) \
                    .join(common, on="word", how="inner")

    left, right = doc_words.alias("l"), doc_words.alias("r")
    pairs = left.join(right, col("l.doc_id") == col("r.doc_id")) \
                .filter(col("l.word") != col("r.word")) \
                .select(col("l.word").alias("word"), col("r.word").alias("associate")) \
                .groupBy("word", "associate").agg(count("*").alias("shared_records"))
    return spark_group_top_k(pairs, "word", "shared_records", max_associations,
                             item_cols=["associate", "shared_records"], order_col="associate")


def run(spark: SparkSession, input_path: str, output_path: str,
        min_frequency: float = DEFAULT_MIN_CORPUS_FREQUENCY, max_associations: int = DEFAULT_MAX_ASSOCIATIONS,
        min_length: int = DEFAULT_MIN_WORD_LENGTH):
    start = time.time()
    metrics = {"min_corpus_frequency": min_frequency, "max_associations": max_associations}

    with stage_timer(metrics, "read"):
        records = spark.read.parquet(input_path).cache()
        metrics["total_records"] = records.count()

    with stage_timer(metrics, "associations"):
        associations = word_associations(records, min_frequency, max_associations, min_length).cache()
        associations.write.mode("overwrite").parquet(output_path)
        metrics["words"] = associations.count()
    logger.info(f"Associations for {metrics['words']} words written to {output_path}")

    finalize_metrics(metrics, start)
    save_json_to_s3(metrics, f"{METRICS_PATH}association_metrics.json")
    return associations


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Co-occurrence associations for common words")
    parser.add_argument("--input", default=f"s3://{BUCKET_NAME}/{INGESTED_PREFIX}")
    parser.add_argument("--output", default=f"s3://{BUCKET_NAME}/{ASSOCIATIONS_PREFIX}")
    parser.add_argument("--min-frequency", type=float, default=DEFAULT_MIN_CORPUS_FREQUENCY)
    parser.add_argument("--max-associations", type=int, default=DEFAULT_MAX_ASSOCIATIONS)
    parser.add_argument("--min-word-length", type=int, default=DEFAULT_MIN_WORD_LENGTH)
    return parser.parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    spark = build_spark_session("WordAssociations")

    try:
        run(spark, args.input, args.output, args.min_frequency, args.max_associations, args.min_word_length)
    except Exception as e:
        logger.error(f"Error during word association analysis: {e}")
        raise
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
