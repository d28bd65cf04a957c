import json
import re
from unittest.mock import patch

from botocore.exceptions import ClientError

from submissions_api.adapters.storage import (
    DisabledSubmissionStore,
    S3SubmissionStore,
    StorageFactory,
    new_object_key,
    sort_newest_first,
)
from tests.consts import OBJECT_KEY_PATTERN, TEST_BUCKET_NAME


def _record(name: str, timestamp: str) -> dict:
    return {
        "id": f"id-{name}",
        "name": name,
        "email": f"{name}@example.com",
        "category": "feedback",
        "message": "hello",
        "timestamp": timestamp,
    }


def test_new_object_key_format():
    keys = {new_object_key() for _ in range(50)}
    assert all(re.match(OBJECT_KEY_PATTERN, key) for key in keys)
    assert len(keys) == 50


def test_sort_newest_first_puts_missing_timestamps_last():
    records = [
        {"name": "none"},
        _record("old", "2024-01-01T00:00:00.000Z"),
        {"name": "garbage", "timestamp": "not-a-date"},
        _record("new", "2024-03-01T00:00:00.000Z"),
    ]
    ordered = [r["name"] for r in sort_newest_first(records)]
    assert ordered[:2] == ["new", "old"]
    assert set(ordered[2:]) == {"none", "garbage"}


async def test_put_writes_pretty_json_object(s3_store, s3_client):
    record = _record("ada", "2024-01-01T00:00:00.000Z")

    result = await s3_store.put(record)

    assert result.success is True
    assert result.message == "Submission stored successfully"
    assert re.match(OBJECT_KEY_PATTERN, result.object_key)

    obj = s3_client.get_object(Bucket=TEST_BUCKET_NAME, Key=result.object_key)
    body = obj["Body"].read().decode("utf-8")
    assert obj["ContentType"] == "application/json"
    assert body == json.dumps(record, indent=2)


async def test_put_reports_failure_without_raising(s3_store, s3_client):
    s3_client.delete_bucket(Bucket=TEST_BUCKET_NAME)

    result = await s3_store.put(_record("ada", "2024-01-01T00:00:00.000Z"))

    assert result.success is False
    assert result.message.startswith("Error storing submission: ")
    assert result.object_key is None


async def test_list_empty_bucket(s3_store):
    assert await s3_store.list(10) == []


async def test_list_sorts_by_timestamp_and_attaches_object_metadata(s3_store, put_raw_object):
    put_raw_object("a.json", _record("middle", "2024-02-01T00:00:00.000Z"))
    put_raw_object("b.json", _record("newest", "2024-03-01T00:00:00.000Z"))
    put_raw_object("c.json", _record("oldest", "2024-01-01T00:00:00.000Z"))

    submissions = await s3_store.list(10)

    assert [s["name"] for s in submissions] == ["newest", "middle", "oldest"]
    assert [s["blobName"] for s in submissions] == ["b.json", "a.json", "c.json"]
    assert all(s["lastModified"] for s in submissions)


async def test_list_skips_unparseable_objects(s3_store, put_raw_object):
    put_raw_object("a.json", "{not json", content_type="text/plain")
    put_raw_object("b.json", [1, 2, 3])
    put_raw_object("c.json", b"\xff\xfe\x00")
    put_raw_object("d.json", _record("ok", "2024-01-01T00:00:00.000Z"))

    submissions = await s3_store.list(10)

    assert [s["name"] for s in submissions] == ["ok"]


async def test_list_stops_after_limit_parsed_objects(s3_store, put_raw_object):
    # S3 lists keys lexicographically, so only a.json and b.json are examined
    put_raw_object("a.json", _record("a", "2024-01-01T00:00:00.000Z"))
    put_raw_object("b.json", _record("b", "2024-01-02T00:00:00.000Z"))
    put_raw_object("c.json", _record("c", "2024-12-31T00:00:00.000Z"))

    submissions = await s3_store.list(2)

    assert [s["name"] for s in submissions] == ["b", "a"]


async def test_list_does_not_count_skipped_objects(s3_store, put_raw_object):
    put_raw_object("a.json", "broken")
    put_raw_object("b.json", _record("b", "2024-01-02T00:00:00.000Z"))
    put_raw_object("c.json", _record("c", "2024-01-03T00:00:00.000Z"))

    submissions = await s3_store.list(2)

    assert [s["name"] for s in submissions] == ["c", "b"]


async def test_list_with_non_positive_limit_is_empty(s3_store, put_raw_object):
    put_raw_object("a.json", _record("a", "2024-01-01T00:00:00.000Z"))

    assert await s3_store.list(0) == []
    assert await s3_store.list(-3) == []


async def test_list_returns_empty_on_storage_error(s3_store, s3_client):
    s3_client.delete_bucket(Bucket=TEST_BUCKET_NAME)

    assert await s3_store.list(10) == []


async def test_disabled_store_accepts_writes_and_lists_nothing():
    store = DisabledSubmissionStore()

    result = await store.put(_record("ada", "2024-01-01T00:00:00.000Z"))

    assert store.is_configured is False
    assert result.success is True
    assert result.message == "Stored locally (development mode)"
    assert result.object_key is None
    assert await store.list(10) == []


def test_factory_returns_disabled_store_in_local_dev(local_settings):
    store = StorageFactory.get_submission_store(local_settings)
    assert isinstance(store, DisabledSubmissionStore)


def test_factory_initializes_bucket(aws_settings, s3_client):
    store = StorageFactory.get_submission_store(aws_settings)

    assert isinstance(store, S3SubmissionStore)
    assert store.is_configured is True
    s3_client.head_bucket(Bucket=TEST_BUCKET_NAME)


def test_factory_falls_back_when_initialization_fails(aws_settings):
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "CreateBucket")
    with patch.object(S3SubmissionStore, "initialize", side_effect=error):
        store = StorageFactory.get_submission_store(aws_settings)

    assert isinstance(store, DisabledSubmissionStore)
