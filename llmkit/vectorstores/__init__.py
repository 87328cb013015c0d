"""Vector store exports."""

from .base import VectorStore
from .factory import create_vector_store
from .mongodb_atlas import MongoDBAtlasVectorSearch

__all__ = ["VectorStore", "MongoDBAtlasVectorSearch", "create_vector_store"]
