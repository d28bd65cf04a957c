"""
Submission storage adapters.

Two stores share one contract: ``S3SubmissionStore`` writes each submission as a
JSON object in an S3 bucket, ``DisabledSubmissionStore`` stands in when no storage
is configured (writes are accepted but not persisted, reads are empty).
``StorageFactory`` picks one at startup.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import boto3
from fastapi.concurrency import run_in_threadpool

from submissions_api.s3.buckets import ensure_private_bucket
from submissions_api.s3.read_objects import fetch_s3_object_text, iter_s3_objects
from submissions_api.s3.write_objects import upload_s3_object
from submissions_api.schemas import epoch_millis, random_token
from submissions_api.settings import Settings
from submissions_api.utils.decorators import async_log_execution_time

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
OBJECT_KEY_PREFIX = "submission-"


def new_object_key() -> str:
    """``submission-<epoch-millis>-<9-char-token>.json``"""
    return f"{OBJECT_KEY_PREFIX}{epoch_millis()}-{random_token()}.json"


def _timestamp_sort_key(record: Dict[str, Any]) -> datetime:
    # Records without a usable timestamp sort last
    value = record.get("timestamp")
    if not isinstance(value, str):
        return datetime.min.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_newest_first(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(records, key=_timestamp_sort_key, reverse=True)


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a single write."""
    success: bool
    message: str
    object_key: Optional[str] = None


class BaseSubmissionStore:
    """Base class for submission storage (extended by specific implementations)"""

    @property
    def is_configured(self) -> bool:
        raise NotImplementedError

    def initialize(self) -> None:
        raise NotImplementedError

    async def put(self, record: Dict[str, Any]) -> StoreResult:
        raise NotImplementedError

    async def list(self, limit: int) -> List[Dict[str, Any]]:
        raise NotImplementedError


class DisabledSubmissionStore(BaseSubmissionStore):
    """Degraded local mode: nothing is persisted."""

    @property
    def is_configured(self) -> bool:
        return False

    def initialize(self) -> None:
        pass

    async def put(self, record: Dict[str, Any]) -> StoreResult:
        logger.info("S3 storage not configured. Data: %s", record)
        return StoreResult(success=True, message="Stored locally (development mode)")

    async def list(self, limit: int) -> List[Dict[str, Any]]:
        return []


class S3SubmissionStore(BaseSubmissionStore):
    """Stores each submission as one pretty-printed JSON object in an S3 bucket."""

    def __init__(self, s3_client: "S3Client", bucket_name: str, region: Optional[str] = None):
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3SubmissionStore":
        s3_client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        logger.info(f"Using S3 bucket: {settings.s3_bucket_name}")
        logger.info(f"  Endpoint: {settings.aws_endpoint_url}")
        logger.info(f"  Region: {settings.aws_region}")
        return cls(s3_client, settings.s3_bucket_name, region=settings.aws_region)

    @property
    def is_configured(self) -> bool:
        return True

    def initialize(self) -> None:
        """Create the bucket if missing and keep it private. Raises on failure."""
        ensure_private_bucket(self.bucket_name, self.s3_client, region=self.region)

    @async_log_execution_time
    async def put(self, record: Dict[str, Any]) -> StoreResult:
        """Write ``record`` under a fresh key. A failed attempt is reported, not retried."""
        object_key = new_object_key()
        body = json.dumps(record, indent=2)
        try:
            await run_in_threadpool(
                upload_s3_object,
                bucket_name=self.bucket_name,
                object_key=object_key,
                file_content=body,
                s3_client=self.s3_client,
                content_type=JSON_CONTENT_TYPE,
            )
        except Exception as e:
            logger.error(f"Error storing submission: {str(e)}")
            return StoreResult(success=False, message=f"Error storing submission: {str(e)}")

        logger.info(f"Submission stored in object: {object_key}")
        return StoreResult(success=True, message="Submission stored successfully", object_key=object_key)

    @async_log_execution_time
    async def list(self, limit: int) -> List[Dict[str, Any]]:
        """
        Return up to ``limit`` stored submissions, newest first.

        Enumeration stops as soon as ``limit`` objects have parsed, and only that
        subset is sorted. When S3's listing order (lexicographic by key) differs
        from insertion order, this is not the true most recent ``limit``.
        """
        if limit <= 0:
            return []
        try:
            submissions = await run_in_threadpool(self._collect, limit)
        except Exception as e:
            logger.error(f"Error retrieving submissions: {str(e)}")
            return []
        return sort_newest_first(submissions)[:limit]

    def _collect(self, limit: int) -> List[Dict[str, Any]]:
        submissions = []
        for summary in iter_s3_objects(self.bucket_name, self.s3_client):
            if len(submissions) >= limit:
                break
            object_key = summary["Key"]
            try:
                document = json.loads(fetch_s3_object_text(self.bucket_name, object_key, self.s3_client))
            except ValueError as e:
                # Covers both undecodable bytes and malformed JSON
                logger.error(f"Error parsing object {object_key}: {str(e)}")
                continue
            if not isinstance(document, dict):
                logger.error(f"Error parsing object {object_key}: expected a JSON object")
                continue

            last_modified = summary.get("LastModified")
            submissions.append({
                **document,
                "blobName": object_key,
                "lastModified": last_modified.isoformat() if last_modified else None,
            })
        return submissions


class StorageFactory:
    """Factory to initialize the correct submission store based on deployment mode"""

    @staticmethod
    def get_submission_store(settings: Settings) -> BaseSubmissionStore:
        if not settings.storage_enabled:
            logger.info("S3 storage not configured. Running in local mode.")
            return DisabledSubmissionStore()

        try:
            store = S3SubmissionStore.from_settings(settings)
            store.initialize()
        except Exception as e:
            logger.error(f"Error initializing S3 storage: {str(e)}")
            return DisabledSubmissionStore()

        logger.info("S3 storage initialized successfully")
        return store
