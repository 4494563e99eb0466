# backend/birdsurvey/api/routers/rookery.py
from birdsurvey.api.deps import get_rookery_manager
from birdsurvey.schemas.survey import RookeryCensusModel, RookeryExportItem
from birdsurvey.services.mapping import rookery as mapping

from .surveys import build_router

PREFIX = "/rookerycensus"

router = build_router(
    model=RookeryCensusModel,
    export_item=RookeryExportItem,
    mapping=mapping,
    get_manager=get_rookery_manager,
    prefix=PREFIX,
)
