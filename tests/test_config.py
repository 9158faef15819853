from moto import mock_aws
from s3jsonstore.codec import JSONCodec
from s3jsonstore.config import store_from_string
from s3jsonstore.errors import StoreInitError
from s3jsonstore.s3client import S3Client
from s3jsonstore.store import CRUDStore

import boto3
import pytest
import ZConfig


@pytest.fixture
def s3_env():
    with mock_aws():
        boto3.client("s3", region_name="us-east-1").create_bucket(Bucket="test-bucket")
        yield


class TestZConfig:
    def test_creates_store(self, s3_env):
        store = store_from_string(
            """\
            <s3jsonstore>
                bucket-name test-bucket
                s3-region us-east-1
            </s3jsonstore>
            """
        )
        assert isinstance(store, CRUDStore)
        store.create("k", {"a": 1})
        assert store.get("k") == {"a": 1}

    def test_all_options(self, s3_env, monkeypatch):
        # The mock does not answer on a custom endpoint.
        monkeypatch.setattr(S3Client, "_check_bucket", lambda self: None)
        store = store_from_string(
            """\
            <s3jsonstore>
                bucket-name test-bucket
                filename-format records/%s.txt
                content-type text/plain
                s3-endpoint-url http://localhost:9000
                s3-region us-east-1
                s3-access-key minioadmin
                s3-secret-key minioadmin
                s3-use-ssl false
                s3-addressing-style path
                s3-connect-timeout 5
                s3-read-timeout 10
            </s3jsonstore>
            """
        )
        client = store._client
        assert client.bucket_name == "test-bucket"
        assert client.filename("k") == "records/k.txt"
        assert client.content_type == "text/plain"
        assert client._s3.meta.endpoint_url == "http://localhost:9000"
        assert client._s3.meta.config.connect_timeout == 5
        assert client._s3.meta.config.read_timeout == 10

    def test_default_values(self, s3_env):
        store = store_from_string(
            """\
            <s3jsonstore>
                bucket-name test-bucket
                s3-region us-east-1
            </s3jsonstore>
            """
        )
        client = store._client
        assert client.filename_format == "%s.json"
        assert client.content_type == "application/json"
        assert client._s3.meta.config.connect_timeout == 60

    def test_codec_passed_through(self, s3_env):
        codec = JSONCodec()
        store = store_from_string(
            """\
            <s3jsonstore>
                bucket-name test-bucket
                s3-region us-east-1
            </s3jsonstore>
            """,
            codec=codec,
        )
        assert store._codec is codec

    def test_bucket_name_required(self, s3_env):
        with pytest.raises(ZConfig.ConfigurationError):
            store_from_string(
                """\
                <s3jsonstore>
                    s3-region us-east-1
                </s3jsonstore>
                """
            )

    def test_missing_bucket(self, s3_env):
        with pytest.raises(StoreInitError):
            store_from_string(
                """\
                <s3jsonstore>
                    bucket-name other-bucket
                    s3-region us-east-1
                </s3jsonstore>
                """
            )
