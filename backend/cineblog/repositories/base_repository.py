from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from pydantic import BaseModel
from cineblog.core.interfaces import DocumentStoreInterface

ModelType = TypeVar("ModelType", bound=BaseModel)

class BaseRepository(Generic[ModelType]):
    """Base repository mapping one document collection onto a pydantic model.

    The model must provide a ``from_document`` classmethod.
    """

    def __init__(self, model: Type[ModelType], store: DocumentStoreInterface, collection: str):
        self.model = model
        self.store = store
        self.collection = collection

    def get_one_by(self, field: str, value: Any) -> Optional[ModelType]:
        """Filter by one field and return the first match"""
        document = self.store.find_one(self.collection, field, value)
        return self.model.from_document(document) if document else None

    def get_all(self, order_by: Optional[str] = None, descending: bool = False) -> List[ModelType]:
        """Get every document in the collection"""
        documents = self.store.find_all(self.collection, order_by=order_by, descending=descending)
        return [self.model.from_document(document) for document in documents]

    def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """Create new document"""
        document = self.store.add(self.collection, obj_in)
        return self.model.from_document(document)
