import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from submissions_api.adapters.storage import S3SubmissionStore
from submissions_api.main import create_app
from submissions_api.settings import Settings, get_settings
from tests.consts import TEST_BUCKET_NAME, TEST_REGION

pytest_plugins = ["tests.fixtures.submission_fixtures"]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell and the settings cache out of the tests."""
    for var in ("DEPLOYMENT_MODE", "AWS_ENDPOINT_URL", "S3_BUCKET_NAME", "PORT", "HOST", "LOG_LEVEL", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials so boto3 never reaches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)


@pytest.fixture
def mocked_aws(aws_credentials):
    with mock_aws():
        yield


@pytest.fixture
def s3_client(mocked_aws):
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def aws_settings(mocked_aws) -> Settings:
    return Settings(
        deployment_mode="aws-prod",
        s3_bucket_name=TEST_BUCKET_NAME,
        aws_region=TEST_REGION,
    )


@pytest.fixture
def local_settings() -> Settings:
    return Settings(deployment_mode="local-dev")


@pytest.fixture
def s3_store(aws_settings) -> S3SubmissionStore:
    store = S3SubmissionStore.from_settings(aws_settings)
    store.initialize()
    return store


@pytest.fixture
def client(aws_settings):
    app = create_app(settings=aws_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def local_client(local_settings):
    app = create_app(settings=local_settings)
    with TestClient(app) as client:
        yield client
