from .catalog_service import CatalogService
from .layout_instance_service import LayoutInstanceService, to_canvas_coordinate
from .grouping_service import GroupingService
from .reservation_service import GroupReservationService
from .layout_query_service import LayoutQueryService

__all__ = [
    "CatalogService",
    "LayoutInstanceService",
    "to_canvas_coordinate",
    "GroupingService",
    "GroupReservationService",
    "LayoutQueryService",
]
