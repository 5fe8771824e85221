# backend/tests/factories/floorplan.py

import factory
from factory import Sequence, LazyAttribute
from .base import BaseFactory
from modules.floorplan.models.floorplan_models import CatalogTable


class CatalogTableFactory(BaseFactory):
    """Factory for catalog tables laid out left to right."""

    class Meta:
        model = CatalogTable

    id = Sequence(lambda n: n + 1)
    name = LazyAttribute(lambda obj: f"T{obj.id}")
    default_x = LazyAttribute(lambda obj: 40 + (obj.id - 1) * 120)
    default_y = 40
    width = 80
    height = 80
    capacity = factory.Iterator([2, 4, 6])
