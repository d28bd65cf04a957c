"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import Iterator

try:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import ObjectTypeDef
except ImportError:
    ...


def iter_s3_objects(bucket_name: str, s3_client: "S3Client", prefix: str = "") -> Iterator["ObjectTypeDef"]:
    """
    Lazily yield object summaries in the order S3 lists them.

    Pages are fetched only as the caller consumes them, so breaking out of the
    loop stops further ``ListObjectsV2`` calls.
    """
    paginator = s3_client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=bucket_name, Prefix=prefix):
        yield from page.get("Contents", [])


def fetch_s3_object_text(bucket_name: str, object_key: str, s3_client: "S3Client") -> str:
    """Download an object and decode its body as UTF-8."""
    response = s3_client.get_object(Bucket=bucket_name, Key=object_key)
    return response["Body"].read().decode("utf-8")
