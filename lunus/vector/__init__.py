"""
Vector search support.

Modules:
    supabase_client - SupabaseClient, PostgREST access to the products table
    embedder - ClipEmbedder, CLIP image embeddings via Replicate
    vectorizer - ProductVectorizer, upload, embedding and similarity search
"""

from .embedder import ClipEmbedder, EmbeddingError
from .supabase_client import SupabaseClient
from .vectorizer import ProductVectorizer

__all__ = [
    'SupabaseClient',
    'ClipEmbedder',
    'EmbeddingError',
    'ProductVectorizer',
]
