# backend/birdsurvey/api/routers/foraging.py
from birdsurvey.api.deps import get_foraging_manager
from birdsurvey.schemas.survey import ForagingExportItem, WaterbirdForagingModel
from birdsurvey.services.mapping import foraging as mapping

from .surveys import build_router

PREFIX = "/waterbirdforagingsurvey"

router = build_router(
    model=WaterbirdForagingModel,
    export_item=ForagingExportItem,
    mapping=mapping,
    get_manager=get_foraging_manager,
    prefix=PREFIX,
)
