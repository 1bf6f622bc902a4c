"""Shared fixtures: moto-backed S3 and DynamoDB, and a TestClient wired to them."""
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from assets_api.adapters.metadata_store import MetadataStore
from assets_api.adapters.object_store import ObjectStore
from assets_api.main import create_app
from assets_api.settings import Settings, get_settings
from tests.consts import (
    TEST_BUCKET_NAME,
    TEST_CONTAINER_NAME,
    TEST_DATABASE_NAME,
    TEST_MAX_UPLOAD_BYTES,
    TEST_REGION,
)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can ever reach a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.setenv("DEPLOYMENT_MODE", "aws-mock")
    # boto honours AWS_ENDPOINT_URL, which would route around moto
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mocked_aws(aws_credentials):
    with mock_aws():
        yield


@pytest.fixture
def app_settings(aws_credentials) -> Settings:
    return Settings(
        deployment_mode="aws-mock",
        aws_region=TEST_REGION,
        aws_endpoint_url=None,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        blob_container_name=TEST_BUCKET_NAME,
        metadata_database_name=TEST_DATABASE_NAME,
        metadata_container_name=TEST_CONTAINER_NAME,
        max_upload_bytes=TEST_MAX_UPLOAD_BYTES,
    )


@pytest.fixture
def object_store(mocked_aws, app_settings) -> ObjectStore:
    return ObjectStore.from_settings(app_settings)


@pytest.fixture
def metadata_store(mocked_aws, app_settings) -> MetadataStore:
    store = MetadataStore.from_settings(app_settings)
    store.create_table_if_absent()
    return store


@pytest.fixture
def client(app_settings, object_store, metadata_store) -> TestClient:
    app = create_app(
        settings=app_settings,
        object_store=object_store,
        metadata_store=metadata_store,
    )
    with TestClient(app) as test_client:
        yield test_client
