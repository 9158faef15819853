from botocore.config import Config
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError
from s3jsonstore.errors import ConflictError
from s3jsonstore.errors import error_code
from s3jsonstore.errors import mask_client_error
from s3jsonstore.errors import ObjectExistsError
from s3jsonstore.errors import ObjectNotFound
from s3jsonstore.errors import StorageOperationError
from s3jsonstore.errors import StoreInitError
from s3jsonstore.interfaces import IObjectHandle
from s3jsonstore.interfaces import IObjectStoreClient
from zope.interface import implementer

import boto3
import contextlib
import logging
import re
import typing


logger = logging.getLogger(__name__)

DEFAULT_FILENAME_FORMAT = "%s.json"
DEFAULT_CONTENT_TYPE = "application/json"

# Never written; reading it only proves the bucket answers us.
_PROBE_KEY = "s3jsonstore-probe-nonexistent-0c1f7d"

_PLACEHOLDER_RE = re.compile(r"%.")


class ObjectAttrs(typing.NamedTuple):
    """Metadata of a stored object. ``generation`` is the service ETag."""

    name: str
    size: int
    generation: str
    content_type: typing.Optional[str] = None
    last_modified: typing.Any = None


@contextlib.contextmanager
def _translate_errors(operation, key, conflict=ConflictError):
    try:
        yield
    except ClientError as e:
        raise mask_client_error(e, operation, key, conflict=conflict) from e
    except BotoCoreError as e:
        logger.debug("S3 %s failed for key=%s: %s", operation, key, e)
        raise StorageOperationError(
            f"{operation} {key}: {type(e).__name__}", operation=operation, key=key
        ) from e


def _as_bytes(data):
    if hasattr(data, "read"):
        data = data.read()
    if isinstance(data, str):
        raise TypeError("object data must be bytes or a binary stream")
    return bytes(data)


def _validate_filename_format(filename_format):
    placeholders = [
        m for m in _PLACEHOLDER_RE.findall(filename_format) if m != "%%"
    ]
    if placeholders != ["%s"]:
        raise ValueError(
            f"filename-format must contain exactly one '%s': {filename_format!r}"
        )


@implementer(IObjectHandle)
class ObjectHandle:
    """Reference to one object, used for precondition-scoped operations."""

    def __init__(self, client, key):
        self._client = client
        self.key = key
        self.name = client.filename(key)

    def __repr__(self):
        return f"<ObjectHandle {self._client.bucket_name}/{self.name}>"

    def attrs(self):
        with _translate_errors("Attrs", self.key):
            resp = self._client._s3.head_object(
                Bucket=self._client.bucket_name, Key=self.name
            )
        return ObjectAttrs(
            name=self.name,
            size=resp.get("ContentLength", 0),
            generation=resp["ETag"],
            content_type=resp.get("ContentType"),
            last_modified=resp.get("LastModified"),
        )

    def read(self):
        with _translate_errors("Get", self.key):
            resp = self._client._s3.get_object(
                Bucket=self._client.bucket_name, Key=self.name
            )
            with contextlib.closing(resp["Body"]) as body:
                return body.read()

    def write(self, data, if_generation_match=None, if_does_not_exist=False):
        """Write ``data`` in a single request and return the new generation.

        The request is the commit: if it raises, nothing was written.
        """
        if if_generation_match is not None and if_does_not_exist:
            raise ValueError(
                "if_generation_match and if_does_not_exist are exclusive"
            )
        kwargs = {
            "Bucket": self._client.bucket_name,
            "Key": self.name,
            "Body": _as_bytes(data),
            "ContentType": self._client.content_type,
        }
        conflict = ConflictError
        if if_does_not_exist:
            kwargs["IfNoneMatch"] = "*"
            conflict = ObjectExistsError
        elif if_generation_match is not None:
            kwargs["IfMatch"] = if_generation_match
        try:
            with _translate_errors("Write", self.key, conflict=conflict):
                resp = self._client._s3.put_object(**kwargs)
        except ObjectNotFound as e:
            if if_generation_match is None:
                raise
            # Deleted after its generation was observed.
            raise ConflictError(
                f"Write {self.key}: object gone since generation "
                f"{if_generation_match}",
                operation="Write",
                key=self.key,
            ) from e.cause
        return resp.get("ETag")

    def delete(self):
        with _translate_errors("Delete", self.key):
            self._client._s3.delete_object(
                Bucket=self._client.bucket_name, Key=self.name
            )


@implementer(IObjectStoreClient)
class S3Client:
    """Thin boto3 wrapper mapping keys to JSON objects in one bucket."""

    def __init__(
        self,
        bucket_name,
        filename_format=DEFAULT_FILENAME_FORMAT,
        content_type=DEFAULT_CONTENT_TYPE,
        endpoint_url=None,
        region_name=None,
        aws_access_key_id=None,
        aws_secret_access_key=None,
        use_ssl=True,
        addressing_style="auto",
        connect_timeout=60,
        read_timeout=60,
    ):
        _validate_filename_format(filename_format)
        if addressing_style not in ("auto", "path", "virtual"):
            raise ValueError(
                f"s3-addressing-style must be auto, path or virtual: "
                f"{addressing_style!r}"
            )
        self.bucket_name = bucket_name
        self.filename_format = filename_format
        self.content_type = content_type

        config = Config(
            s3={"addressing_style": addressing_style},
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )

        kwargs = {"config": config}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if region_name:
            kwargs["region_name"] = region_name
        if aws_access_key_id:
            kwargs["aws_access_key_id"] = aws_access_key_id
        if aws_secret_access_key:
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        kwargs["use_ssl"] = use_ssl
        if not use_ssl:
            logger.warning(
                "S3 SSL is disabled, data and credentials are transmitted in cleartext"
            )

        self._s3 = boto3.client("s3", **kwargs)
        self._check_bucket()
        logger.info("Opened S3 JSON store on bucket %s", bucket_name)

    def _check_bucket(self):
        # HEAD cannot tell a missing key from a missing bucket, GET can.
        try:
            self._s3.get_object(Bucket=self.bucket_name, Key=_PROBE_KEY)
        except ClientError as e:
            if error_code(e) == "NoSuchKey":
                return
            raise StoreInitError(
                f"init check on bucket {self.bucket_name!r} failed: "
                f"{error_code(e)}",
                operation="Init",
            ) from e
        except BotoCoreError as e:
            raise StoreInitError(
                f"init check on bucket {self.bucket_name!r} failed: "
                f"{type(e).__name__}",
                operation="Init",
            ) from e

    def filename(self, key):
        return self.filename_format % key

    def object(self, key):
        return ObjectHandle(self, key)

    def write_file(self, key, data):
        """Create the object for ``key``; fails if one already exists."""
        return self.object(key).write(data, if_does_not_exist=True)

    def get_file(self, key):
        return self.object(key).read()

    def list_objects(self, prefix=""):
        paginator = self._s3.get_paginator("list_objects_v2")
        with _translate_errors("List", prefix):
            pages = paginator.paginate(
                Bucket=self.bucket_name, Prefix=prefix, FetchOwner=False
            )
            for page in pages:
                for obj in page.get("Contents", []):
                    yield ObjectAttrs(
                        name=obj["Key"],
                        size=obj.get("Size", 0),
                        generation=obj.get("ETag", ""),
                        last_modified=obj.get("LastModified"),
                    )
