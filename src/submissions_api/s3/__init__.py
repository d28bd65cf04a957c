"""
Thin wrappers over the boto3 S3 client.

Contains bucket setup, object writes, and object reads used by the S3 submission store.
"""
