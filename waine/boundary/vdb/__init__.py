"""
Vector database boundary layer.

Provides the similarity search over the persisted chunk index.
- FAISSChunkStore: FAISS-backed store (LangChain integration)

Dependencies: langchain_community
System role: Vector store adapter for RAG retrieval
"""

from waine.boundary.vdb.faiss_store import FAISSChunkStore, distance_to_similarity

__all__ = ["FAISSChunkStore", "distance_to_similarity"]
