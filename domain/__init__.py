"""
Domain layer - Business entities, schemas, enums and pure calculations.
"""

from domain import enums, schemas, calculators

__all__ = ["enums", "schemas", "calculators"]
