"""
Indexing Module - Embeddings and similarity search clients.
===========================================================

This module wraps the remote collaborators that sit in front of the
lecture index:

- embeddings_base: Abstract interface for embedding providers
- embeddings_gemini: Gemini API embeddings
- gemini: Shared Google GenAI client construction and error mapping
- vector_store: Supabase RPC similarity search

The index itself is built and maintained outside this application.
"""

from lecturebot.indexing.embeddings_base import EmbeddingProvider
from lecturebot.indexing.embeddings_gemini import GeminiEmbeddingProvider
from lecturebot.indexing.vector_store import SupabaseVectorStore

__all__ = [
    # Base
    "EmbeddingProvider",
    # Providers
    "GeminiEmbeddingProvider",
    # Vector Store
    "SupabaseVectorStore",
]
