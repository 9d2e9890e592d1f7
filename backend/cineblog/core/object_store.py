import logging
from pathlib import Path
from urllib.parse import quote
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from .exceptions import ObjectStoreException
from .interfaces import ObjectStoreInterface

logger = logging.getLogger(__name__)


class LocalObjectStore(ObjectStoreInterface):
    """Filesystem object store for development; files are served from a static mount"""

    def __init__(self, root: str, base_url: str = "/media"):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def save(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise ObjectStoreException(f"Refusing to write outside media root: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Storage Error writing {path}: {str(e)}")
            raise ObjectStoreException(f"Failed to store {path}") from e
        logger.info(f"Stored {len(data)} bytes at {target}")
        return f"{self.base_url}/{quote(path)}"


class AzureBlobObjectStore(ObjectStoreInterface):
    """Azure Blob Storage backend with a publicly readable container"""

    def __init__(self, container: ContainerClient):
        self.container = container

    @classmethod
    def from_connection_string(cls, connection_string: str, container_name: str) -> "AzureBlobObjectStore":
        service = BlobServiceClient.from_connection_string(connection_string)
        container = service.get_container_client(container_name)
        try:
            container.create_container(public_access="blob")
        except ResourceExistsError:
            pass
        return cls(container)

    def save(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        kwargs = {}
        if content_type:
            kwargs["content_settings"] = ContentSettings(content_type=content_type)
        try:
            blob = self.container.get_blob_client(path)
            blob.upload_blob(data, overwrite=True, **kwargs)
        except AzureError as e:
            logger.error(f"Storage Error uploading {path}: {str(e)}")
            raise ObjectStoreException(f"Failed to upload {path}") from e
        return blob.url
