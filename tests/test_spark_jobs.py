import pytest

from data_ingestion import ingest_records
from period_frequency import spark_period_frequencies
from sentiment_analysis import group_summary, score_records
from top_k import spark_group_top_k
from trending_topics import trending_by_period
from weblog_report import daily_report, parse_logs
from word_associations import word_associations


def test_ingestion_drops_unusable_records(spark):
    raw = spark.createDataFrame([
        ("cloud storage rocks", "2013-02-01", "tech"),
        (None, "2013-02-01", "tech"),
        ("   ", "2013-02-01", "tech"),
        ("phones again", "yesterday-ish", "tech"),
        ("tablets everywhere", "2013-03-05T10:00:00Z", None),
    ], ["body", "published", "section"])

    rows = ingest_records(raw, "body", "published", "section").orderBy("period").collect()

    assert [(r.text, r.period, r.group_key) for r in rows] == [
        ("cloud storage rocks", "2013-02", "tech"),
        ("tablets everywhere", "2013-03", "unknown"),
    ]


def test_spark_frequencies_sum_to_one(spark):
    words = spark.createDataFrame([
        ("2013-01", "cloud"), ("2013-01", "cloud"), ("2013-01", "phone"), ("2013-02", "phone"),
    ], ["period", "word"])
    freqs = {(r.word, r.period): r.frequency for r in spark_period_frequencies(words).collect()}
    assert freqs == {("cloud", "2013-01"): pytest.approx(2 / 3), ("phone", "2013-01"): pytest.approx(1 / 3),
                     ("phone", "2013-02"): 1.0}


def test_trending_by_period(spark):
    records = spark.createDataFrame([
        ("cloud cloud phone phone", "2013-01"),
        ("cloud cloud cloud phone", "2013-02"),
    ], ["text", "period"])

    ranked = trending_by_period(records, top_n=5).orderBy("period", "rank").collect()

    # 2013-01: both words first appear; 2013-02: only cloud rises
    assert [(r.period, r.rank, r.word) for r in ranked] == [
        ("2013-01", 1, "cloud"), ("2013-01", 2, "phone"), ("2013-02", 1, "cloud"),
    ]
    cloud = ranked[2]
    assert cloud.absolute_velocity == pytest.approx(0.25)
    assert cloud.relative_velocity == pytest.approx((0.75 / 0.5) ** 0.5)
    assert cloud.combined_velocity == pytest.approx(1000000 * 0.25 * (1.5 ** 0.5))


def test_spark_group_top_k_ties_follow_order_column(spark):
    df = spark.createDataFrame([
        ("a", "x", 1), ("a", "y", 3), ("a", "z", 3), ("b", "x", 2),
    ], ["grp", "item", "score"])

    rows = spark_group_top_k(df, "grp", "score", 2, item_cols=["item", "score"], order_col="item") \
        .orderBy("grp").collect()

    assert [[i.item for i in r.top_items] for r in rows] == [["y", "z"], ["x"]]


def test_sentiment_summary(spark):
    records = spark.createDataFrame([
        ("not very good", "2013-01", "cables"),
        ("excellent cable", "2013-01", "cables"),
        (None, "2013-01", "cables"),
        ("it arrived", "2013-01", "phones"),
    ], "text string, period string, group_key string")

    scored = score_records(records)
    summary = {r.group_key: r for r in group_summary(scored).collect()}

    assert summary["cables"].records == 2
    assert summary["cables"].avg_score == pytest.approx(0.0)
    assert summary["cables"].positive == 1
    assert summary["cables"].negative == 1
    assert summary["phones"].neutral == 1


def test_weblog_daily_report(spark):
    lines = spark.createDataFrame([
        ('1.1.1.1 - - [10/Oct/2000:13:55:36 -0700] "GET /a HTTP/1.0" 200 100',),
        ('1.1.1.1 - - [10/Oct/2000:13:56:36 -0700] "GET /a HTTP/1.0" 200 100',),
        ('1.1.1.1 - - [10/Oct/2000:13:57:36 -0700] "GET /b HTTP/1.0" 200 5000',),
        ("not a log line",),
    ], ["value"])
    requests = parse_logs(lines)

    by_count = daily_report(requests, "count", top_n=1).collect()
    by_bytes = daily_report(requests, "bytes", top_n=1).collect()

    assert by_count[0].total_requests == 3
    assert by_count[0].total_bytes == 5200
    assert by_count[0].top_items[0].uri == "/a"
    assert by_bytes[0].top_items[0].uri == "/b"


def test_word_associations(spark):
    records = spark.createDataFrame([
        ("cloud storage pricing",),
        ("cloud storage outage",),
        ("cloud pricing",),
    ], ["text"])

    rows = {r.word: r for r in word_associations(records, min_frequency=0.2, max_associations=1,
                                                 min_length=5).collect()}

    # "outage" is below the frequency threshold (1 of 8 tokens)
    assert "outage" not in rows
    assert [(i.associate, i.shared_records) for i in rows["cloud"].top_items] == [("pricing", 2)]
    assert [(i.associate, i.shared_records) for i in rows["storage"].top_items] == [("cloud", 2)]
