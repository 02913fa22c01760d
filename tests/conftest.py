import pytest
from fastapi.testclient import TestClient

from shop_api.config.settings import Settings
from shop_api.main import create_app
from tests.consts import TEST_BUCKET_NAME

pytest_plugins = [
    "tests.fixtures.mocked_aws",
    "tests.fixtures.docstore",
    "tests.fixtures.auth",
]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        deployment_mode="local-dev",
        database_path=str(tmp_path / "api_shop.db"),
        s3_bucket_name=TEST_BUCKET_NAME,
        aws_endpoint_url=None,
        aws_region="us-east-1",
        log_level="DEBUG",
    )


@pytest.fixture
def client(mocked_aws, settings, token_verifier) -> TestClient:
    app = create_app(settings=settings, token_verifier=token_verifier)
    with TestClient(app) as client:
        yield client
