"""S3 helpers: retried uploads and JSON exports."""

import json
import logging
import os
import tempfile
import time
from typing import Any

import boto3

from pipeline_config import BUCKET_NAME

logger = logging.getLogger(__name__)


def upload_to_s3(local_path: str, s3_key: str, bucket_name: str = BUCKET_NAME, max_retries: int = 3):
    """Upload a file to S3 with exponential backoff retries."""
    s3_client = boto3.client('s3')
    for attempt in range(max_retries):
        try:
            s3_client.upload_file(local_path, bucket_name, s3_key)
            logger.info(f"Uploaded to s3://{bucket_name}/{s3_key}")
            return
        except Exception as e:
            logger.warning(f"S3 upload attempt {attempt + 1} failed: {e}")
            if attempt == max_retries - 1:
                logger.error(f"Failed to upload to s3://{bucket_name}/{s3_key} after {max_retries} attempts")
                raise
            time.sleep(2 ** attempt)


def save_json_to_s3(payload: Any, s3_key: str, bucket_name: str = BUCKET_NAME):
    """Dump `payload` to a temporary JSON file and upload it."""
    filename = os.path.basename(s3_key) or "payload.json"
    local_path = os.path.join(tempfile.gettempdir(), filename)
    with open(local_path, "w") as f:
        json.dump(payload, f, indent=4, default=str)
    upload_to_s3(local_path, s3_key, bucket_name)
    return local_path
