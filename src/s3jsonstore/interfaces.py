from zope.interface import Attribute
from zope.interface import Interface


class IObjectStoreClient(Interface):
    """Byte-level access to keyed objects in one bucket."""

    bucket_name = Attribute("Name of the bucket")
    filename_format = Attribute("Format string mapping a key to an object name")
    content_type = Attribute("MIME type stamped on every write")

    def filename(key):
        """Return the object name for key."""

    def write_file(key, data):
        """Create the object for key from bytes or a binary stream.

        Fails without overwriting if the object already exists.
        """

    def get_file(key):
        """Return the full contents of the object for key."""

    def object(key):
        """Return an IObjectHandle for key."""

    def list_objects(prefix):
        """Lazily yield ObjectAttrs for every object name starting with prefix."""


class IObjectHandle(Interface):
    """One object, addressed for precondition-scoped operations."""

    key = Attribute("Logical key")
    name = Attribute("Object name in the bucket")

    def attrs():
        """Return ObjectAttrs; raises ObjectNotFound if missing."""

    def read():
        """Return the object's bytes."""

    def write(data, if_generation_match=None, if_does_not_exist=False):
        """Write data under an optional precondition; return the new generation."""

    def delete():
        """Delete the object."""


class ICodec(Interface):
    """Serialization of the values held by a store."""

    def encode(value):
        """Return value as bytes."""

    def decode(data):
        """Return the value encoded in data."""


class ICRUDStore(Interface):
    """Typed create/get/put/delete store over an IObjectStoreClient."""

    def create(key, value):
        """Store value under a new key."""

    def get(key):
        """Return the value stored under key."""

    def put(key, value):
        """Create or replace the value under key, failing on a concurrent update."""

    def delete(key):
        """Remove the value stored under key."""

    def list(prefix):
        """Lazily yield ObjectAttrs for object names starting with prefix."""
