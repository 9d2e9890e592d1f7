import logging
import re
import uuid
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient
from azure.cosmos.database import DatabaseProxy
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from cineblog.db import Base, create_db_engine, create_session_factory
from cineblog.models.document import DocumentRecord
from .exceptions import DocumentStoreException
from .interfaces import Document, DocumentStoreInterface

logger = logging.getLogger(__name__)

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_field_name(field_name: str) -> str:
    if not _FIELD_NAME.match(field_name):
        raise ValueError(f"Invalid document field name: {field_name!r}")
    return field_name


def _new_document_id() -> str:
    return uuid.uuid4().hex


class SQLDocumentStore(DocumentStoreInterface):
    """Document store on top of a single SQLAlchemy ``documents`` table.

    Each row keeps its collection name and the document body as JSON; field
    filters and ordering are JSON path expressions, so sqlite and Postgres
    both work.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, create_tables: bool = True) -> "SQLDocumentStore":
        engine = create_db_engine(database_url)
        if create_tables:
            Base.metadata.create_all(bind=engine)
        return cls(engine)

    @contextmanager
    def _session(self):
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    @staticmethod
    def _json_field(field_name: str, value: Any):
        element = DocumentRecord.data[_check_field_name(field_name)]
        if isinstance(value, bool):
            return element.as_boolean()
        if isinstance(value, int):
            return element.as_integer()
        if isinstance(value, float):
            return element.as_float()
        return element.as_string()

    @staticmethod
    def _to_document(record: DocumentRecord) -> Document:
        return Document(id=record.id, data=dict(record.data or {}))

    def find_one(self, collection: str, field_name: str, value: Any) -> Optional[Document]:
        try:
            with self._session() as db:
                record = (
                    db.query(DocumentRecord)
                    .filter(DocumentRecord.collection == collection)
                    .filter(self._json_field(field_name, value) == value)
                    .first()
                )
                return self._to_document(record) if record else None
        except SQLAlchemyError as e:
            logger.error(f"Query on {collection}.{field_name} failed: {str(e)}")
            raise DocumentStoreException(f"Failed to query {collection}") from e

    def find_all(self, collection: str, order_by: Optional[str] = None, descending: bool = False) -> List[Document]:
        try:
            with self._session() as db:
                query = db.query(DocumentRecord).filter(DocumentRecord.collection == collection)
                if order_by:
                    key = DocumentRecord.data[_check_field_name(order_by)].as_string()
                    query = query.order_by(key.desc() if descending else key.asc())
                return [self._to_document(record) for record in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Listing {collection} failed: {str(e)}")
            raise DocumentStoreException(f"Failed to list {collection}") from e

    def add(self, collection: str, data: Dict[str, Any]) -> Document:
        doc_id = _new_document_id()
        try:
            with self._session() as db:
                db.add(DocumentRecord(id=doc_id, collection=collection, data=dict(data)))
                db.commit()
                return Document(id=doc_id, data=dict(data))
        except SQLAlchemyError as e:
            logger.error(f"Insert into {collection} failed: {str(e)}")
            raise DocumentStoreException(f"Failed to write to {collection}") from e

    def close(self) -> None:
        self.engine.dispose()


class CosmosDocumentStore(DocumentStoreInterface):
    """Azure Cosmos DB backend: one container per collection, partitioned on /id"""

    def __init__(self, database: DatabaseProxy, client: Optional[CosmosClient] = None):
        self.database = database
        self.client = client

    @classmethod
    def from_connection_string(cls, connection_string: str, database_name: str) -> "CosmosDocumentStore":
        client = CosmosClient.from_connection_string(connection_string)
        return cls(client.get_database_client(database_name), client)

    @staticmethod
    def _to_document(item: Dict[str, Any]) -> Document:
        # Drop Cosmos system properties (_rid, _etag, _ts, ...)
        data = {k: v for k, v in item.items() if not k.startswith("_") and k != "id"}
        return Document(id=item["id"], data=data)

    def _query(self, collection: str, query: str, parameters: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        try:
            container = self.database.get_container_client(collection)
            return list(container.query_items(
                query=query,
                parameters=parameters,
                enable_cross_partition_query=True
            ))
        except AzureError as e:
            logger.error(
                "Cosmos query failed",
                extra={"container": collection, "query": query, "error": str(e)}
            )
            raise DocumentStoreException(f"Failed to query {collection}") from e

    def find_one(self, collection: str, field_name: str, value: Any) -> Optional[Document]:
        query = f"SELECT TOP 1 * FROM c WHERE c.{_check_field_name(field_name)} = @value"
        items = self._query(collection, query, [{"name": "@value", "value": value}])
        return self._to_document(items[0]) if items else None

    def find_all(self, collection: str, order_by: Optional[str] = None, descending: bool = False) -> List[Document]:
        query = "SELECT * FROM c"
        if order_by:
            query += f" ORDER BY c.{_check_field_name(order_by)} {'DESC' if descending else 'ASC'}"
        return [self._to_document(item) for item in self._query(collection, query, [])]

    def add(self, collection: str, data: Dict[str, Any]) -> Document:
        body = {"id": _new_document_id(), **data}
        try:
            container = self.database.get_container_client(collection)
            created = container.create_item(body=body)
        except AzureError as e:
            logger.error(
                "Cosmos insert failed",
                extra={"container": collection, "error": str(e)}
            )
            raise DocumentStoreException(f"Failed to write to {collection}") from e
        return self._to_document(created)
