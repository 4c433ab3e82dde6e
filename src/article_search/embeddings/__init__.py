from .provider import EmbeddingProvider, SentenceTransformerProvider
from .embedder import FieldEmbedder

__all__ = ['EmbeddingProvider', 'SentenceTransformerProvider', 'FieldEmbedder']
