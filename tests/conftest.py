import shutil

import pytest


@pytest.fixture(scope="session")
def spark():
    """Local Spark session; skipped when no Java runtime is available."""
    if shutil.which("java") is None:
        pytest.skip("Java runtime not available for a local Spark session")
    from pyspark.sql import SparkSession

    session = SparkSession.builder \
        .master("local[2]") \
        .appName("analytics-tests") \
        .config("spark.sql.shuffle.partitions", 2) \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()
    yield session
    session.stop()
