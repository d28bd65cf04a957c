"""Functions for preparing the S3 bucket that holds submissions."""

import logging
from typing import Optional

from botocore.exceptions import ClientError

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)

PRIVATE_ACCESS_BLOCK = {
    "BlockPublicAcls": True,
    "IgnorePublicAcls": True,
    "BlockPublicPolicy": True,
    "RestrictPublicBuckets": True,
}


def bucket_exists(bucket_name: str, s3_client: "S3Client") -> bool:
    """Check whether the bucket exists and is reachable with the client's credentials."""
    try:
        s3_client.head_bucket(Bucket=bucket_name)
        return True
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in ("404", "NoSuchBucket"):
            return False
        raise


def ensure_private_bucket(
    bucket_name: str,
    s3_client: "S3Client",
    region: Optional[str] = None,
) -> bool:
    """
    Create the bucket if it does not exist and block all public access to it.

    Safe to call repeatedly.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: A boto3 S3 client.
    :param region: The bucket region. ``us-east-1`` must not be sent as a location constraint.
    :return: True if the bucket was created by this call.
    """
    created = False
    if not bucket_exists(bucket_name, s3_client):
        if region and region != "us-east-1":
            s3_client.create_bucket(
                Bucket=bucket_name,
                CreateBucketConfiguration={"LocationConstraint": region},
            )
        else:
            s3_client.create_bucket(Bucket=bucket_name)
        logger.info(f"Created S3 bucket: {bucket_name}")
        created = True

    s3_client.put_public_access_block(
        Bucket=bucket_name,
        PublicAccessBlockConfiguration=PRIVATE_ACCESS_BLOCK,
    )
    return created
