from embedline.store.base import DocumentStore
from embedline.store.memory import InMemoryDocumentStore
from embedline.store.qdrant import QdrantDocumentStore

__all__ = ["DocumentStore", "InMemoryDocumentStore", "QdrantDocumentStore"]
