"""
Domain mappers package.
Handles transformation between store documents and domain schemas.
"""

from domain.mappers.document_mapper import DocumentMapper

__all__ = ["DocumentMapper"]
