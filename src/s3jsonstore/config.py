import io
import ZConfig


_SCHEMA_XML = """\
<schema>
  <import package="s3jsonstore"/>
  <section type="s3jsonstore" name="*" attribute="store" required="yes"/>
</schema>
"""

_schema = None


class S3JSONStoreFactory:
    """ZConfig factory for CRUDStore."""

    def __init__(self, config):
        self.config = config
        self.name = config.getSectionName()

    def open_client(self):
        from s3jsonstore.s3client import S3Client

        config = self.config
        return S3Client(
            bucket_name=config.bucket_name,
            filename_format=config.filename_format,
            content_type=config.content_type,
            endpoint_url=config.s3_endpoint_url,
            region_name=config.s3_region,
            aws_access_key_id=config.s3_access_key,
            aws_secret_access_key=config.s3_secret_key,
            use_ssl=config.s3_use_ssl,
            addressing_style=config.s3_addressing_style,
            connect_timeout=config.s3_connect_timeout,
            read_timeout=config.s3_read_timeout,
        )

    def open(self, codec=None):
        from s3jsonstore.store import CRUDStore

        return CRUDStore(self.open_client(), codec=codec)


def get_schema():
    global _schema
    if _schema is None:
        _schema = ZConfig.loadSchemaFile(io.StringIO(_SCHEMA_XML))
    return _schema


def store_from_config(section, codec=None):
    return section.open(codec=codec)


def store_from_file(f, codec=None):
    config, _handler = ZConfig.loadConfigFile(get_schema(), f)
    return store_from_config(config.store, codec=codec)


def store_from_string(s, codec=None):
    return store_from_file(io.StringIO(s), codec=codec)
