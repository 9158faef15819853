import logging


logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
CONFLICT_CODES = frozenset(
    {"412", "PreconditionFailed", "ConditionalRequestConflict"}
)


class StoreError(Exception):
    """Base class for every error raised across a store or client operation.

    ``operation`` and ``key`` name the call that failed.
    """

    def __init__(self, message, operation=None, key=None):
        super().__init__(message)
        self.operation = operation
        self.key = key

    @property
    def cause(self):
        """The underlying error this one was raised from, if any."""
        return self.__cause__


class StoreInitError(StoreError):
    """The bucket is unreachable or we may not operate on it."""


class ObjectNotFound(StoreError):
    """No object is stored under the requested key."""


class ConflictError(StoreError):
    """A write precondition was violated by a concurrent writer."""


class ObjectExistsError(ConflictError):
    """Create was called on a key that already holds an object."""


class EncodeError(StoreError):
    """A value could not be serialized."""


class DecodeError(StoreError):
    """Stored bytes are not a valid encoding of the value type."""


class StorageOperationError(StoreError):
    """Any other service or transport failure."""


def error_code(err):
    return err.response.get("Error", {}).get("Code", "Unknown")


def mask_client_error(err, operation, key, conflict=ConflictError):
    """Map a botocore ClientError to the matching StoreError kind.

    The returned error is meant to be raised ``from err`` so the original
    stays reachable through ``cause``.
    """
    code = error_code(err)
    logger.debug("S3 %s failed for key=%s: %s", operation, key, err)
    if code in NOT_FOUND_CODES:
        kind = ObjectNotFound
        message = f"{operation} {key}: object not found"
    elif code in CONFLICT_CODES:
        kind = conflict
        message = f"{operation} {key}: precondition failed ({code})"
    else:
        kind = StorageOperationError
        message = f"{operation} {key}: S3 request failed ({code})"
    return kind(message, operation=operation, key=key)
