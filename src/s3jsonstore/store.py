from s3jsonstore.codec import JSONCodec
from s3jsonstore.errors import ObjectNotFound
from s3jsonstore.errors import StoreError
from s3jsonstore.interfaces import ICRUDStore
from zope.interface import implementer

import contextlib
import logging


logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _operation(operation, key):
    """Relabel store errors raised inside with the public operation name."""
    try:
        yield
    except StoreError as e:
        if e.operation == operation:
            raise
        cause = e.cause if e.cause is not None else e
        raise type(e)(
            f"{operation} {key}: {e}", operation=operation, key=key
        ) from cause


@implementer(ICRUDStore)
class CRUDStore:
    """Typed create/get/put/delete store over an S3Client.

    Values go through ``codec`` (compact JSON by default). ``put`` is a
    compare-and-swap on the object's generation, so a concurrent update
    between its read and its write raises ConflictError instead of being
    overwritten. Nothing is cached; every call hits the service.

    The generation is the S3 ETag, an MD5 of the content for single-part
    writes. Racing puts that all write the bytes already stored therefore
    all succeed; the stored value is the same either way.
    """

    def __init__(self, client, codec=None):
        self._client = client
        self._codec = codec if codec is not None else JSONCodec()

    def __repr__(self):
        return f"<CRUDStore on {self._client.bucket_name!r}>"

    def create(self, key, value):
        with _operation("Create", key):
            data = self._codec.encode(value)
            self._client.write_file(key, data)

    def get(self, key):
        with _operation("Get", key):
            data = self._client.get_file(key)
            return self._codec.decode(data)

    def put(self, key, value):
        with _operation("Put", key):
            data = self._codec.encode(value)
            handle = self._client.object(key)
            # Read the generation first so the write cannot clobber a newer one.
            try:
                generation = handle.attrs().generation
            except ObjectNotFound:
                generation = None

            if generation is None:
                handle.write(data)
            else:
                handle.write(data, if_generation_match=generation)
        logger.debug("Put %s over generation %s", key, generation)

    def delete(self, key):
        with _operation("Delete", key):
            handle = self._client.object(key)
            # S3 deletes succeed for missing keys, so check first.
            handle.attrs()
            handle.delete()

    def list(self, prefix=""):
        return self._client.list_objects(prefix)
