# backend/tests/factories/__init__.py

"""
Shared test factories for the floor plan backend.
"""

from .base import BaseFactory
from .floorplan import CatalogTableFactory
from .utils import create_catalog

__all__ = [
    'BaseFactory',
    'CatalogTableFactory',
    'create_catalog',
]
