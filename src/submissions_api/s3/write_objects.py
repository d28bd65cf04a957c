"""Functions for writing objects to an S3 bucket--the "C" in CRUD."""

from typing import Optional, Union

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...


def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: Union[bytes, str],
    s3_client: "S3Client",
    content_type: Optional[str] = None,
) -> None:
    """
    Upload an object to an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: The content of the object to upload. Strings are sent as UTF-8.
    :param s3_client: A boto3 S3 client.
    :param content_type: The MIME type of the object, e.g. "application/json".
    """
    content_type = content_type or "application/octet-stream"
    if isinstance(file_content, str):
        file_content = file_content.encode("utf-8")
    s3_client.put_object(
        Bucket=bucket_name,
        Key=object_key,
        Body=file_content,
        ContentType=content_type,
    )
