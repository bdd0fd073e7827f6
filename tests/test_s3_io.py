import json
from unittest.mock import MagicMock, patch

import pytest

import s3_io


@patch("s3_io.time.sleep")
@patch("s3_io.boto3.client")
def test_upload_retries_then_succeeds(mock_client, mock_sleep):
    s3 = MagicMock()
    s3.upload_file.side_effect = [Exception("throttled"), None]
    mock_client.return_value = s3

    s3_io.upload_to_s3("/tmp/x.json", "results/x.json", bucket_name="bucket")

    assert s3.upload_file.call_count == 2
    mock_sleep.assert_called_once_with(1)


@patch("s3_io.time.sleep")
@patch("s3_io.boto3.client")
def test_upload_raises_after_last_attempt(mock_client, mock_sleep):
    s3 = MagicMock()
    s3.upload_file.side_effect = Exception("denied")
    mock_client.return_value = s3

    with pytest.raises(Exception, match="denied"):
        s3_io.upload_to_s3("/tmp/x.json", "results/x.json", bucket_name="bucket", max_retries=3)
    assert s3.upload_file.call_count == 3
    assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]


@patch("s3_io.upload_to_s3")
def test_save_json_writes_payload(mock_upload):
    local_path = s3_io.save_json_to_s3({"2013-02": [{"word": "cloud"}]}, "results/json/trending_test.json")

    with open(local_path) as f:
        assert json.load(f) == {"2013-02": [{"word": "cloud"}]}
    mock_upload.assert_called_once_with(local_path, "results/json/trending_test.json", s3_io.BUCKET_NAME)
