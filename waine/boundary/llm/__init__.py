"""
Google Gemini boundary layer.

- QueryEmbedder: query embeddings (Embedding Service)
- GeminiChatClient: streamed chat with optional search grounding
- GeminiVisionClient: uploaded image analysis

Dependencies: google.genai, langchain_google_genai
System role: Generative model adapters
"""

from waine.boundary.llm.embeddings import QueryEmbedder, create_embeddings
from waine.boundary.llm.gemini_client import GeminiChatClient
from waine.boundary.llm.vision_client import GeminiVisionClient

__all__ = [
    "GeminiChatClient",
    "GeminiVisionClient",
    "QueryEmbedder",
    "create_embeddings",
]
