"""API route modules."""
from api.routes import builder, metadata, question_types

__all__ = ["builder", "metadata", "question_types"]
