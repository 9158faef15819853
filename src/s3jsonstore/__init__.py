from s3jsonstore.codec import JSONCodec  # noqa: F401
from s3jsonstore.errors import ConflictError  # noqa: F401
from s3jsonstore.errors import DecodeError  # noqa: F401
from s3jsonstore.errors import EncodeError  # noqa: F401
from s3jsonstore.errors import ObjectExistsError  # noqa: F401
from s3jsonstore.errors import ObjectNotFound  # noqa: F401
from s3jsonstore.errors import StorageOperationError  # noqa: F401
from s3jsonstore.errors import StoreError  # noqa: F401
from s3jsonstore.errors import StoreInitError  # noqa: F401
from s3jsonstore.s3client import ObjectAttrs  # noqa: F401
from s3jsonstore.s3client import S3Client  # noqa: F401
from s3jsonstore.store import CRUDStore  # noqa: F401
