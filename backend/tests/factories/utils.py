# backend/tests/factories/utils.py

from typing import List
from .floorplan import CatalogTableFactory


def create_catalog(num_tables: int = 3) -> List:
    """
    Create a catalog of tables with ids 1..num_tables.

    Args:
        num_tables: Number of catalog tables to create

    Returns:
        List of created CatalogTable rows ordered by id
    """
    CatalogTableFactory.reset_sequence()
    return [CatalogTableFactory() for _ in range(num_tables)]
