# backend/modules/floorplan/services/catalog_service.py

from typing import Iterable, List
from sqlalchemy.orm import Session
import logging

from ..models.floorplan_models import CatalogTable
from ..schemas.floorplan_schemas import CatalogTableSeed

logger = logging.getLogger(__name__)


class CatalogService:
    """Read access to the static table catalog"""

    def __init__(self, db: Session):
        self.db = db

    def list_tables(self) -> List[CatalogTable]:
        """Get all catalog tables ordered by id"""
        return self.db.query(CatalogTable).order_by(CatalogTable.id).all()

    def seed_tables(self, rows: Iterable[CatalogTableSeed]) -> int:
        """
        Insert or replace catalog rows by id.

        Administrative only. Layout instances that already exist keep the
        table states they were created with.
        """
        count = 0
        try:
            for row in rows:
                self.db.merge(CatalogTable(**row.model_dump()))
                count += 1
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Seeded {count} catalog tables")
        return count
