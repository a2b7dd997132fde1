"""Infrastructure layer implementations."""

from src.infrastructure import llm, storage, weather

__all__ = ["storage", "llm", "weather"]
