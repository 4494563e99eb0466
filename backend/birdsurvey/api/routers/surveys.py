# backend/birdsurvey/api/routers/surveys.py
"""Survey endpoints shared by every survey type.

``build_router`` wires one survey type's wire model, mapper and manager
dependency into the common routing table::

    GET  ""                   summary list
    GET  "/export"            completed surveys, one row per observation
    GET  "/user/{user_id}"    a submitter's surveys (empty list, never 404)
    GET  "/{identifier}"      one survey (404 when unknown or not a GUID)
    POST ""                   create pending survey -> 201 + Location
    PUT  "/{identifier}"      update / finish / complete
"""

from types import ModuleType
from typing import Callable, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Response, status

from birdsurvey.api.auth import CurrentUser, get_current_user
from birdsurvey.logging_utils import get_logger
from birdsurvey.schemas.survey import SubmitterListItem, SurveyListItem
from birdsurvey.services.surveys.manager import SurveyManager
from birdsurvey.services.surveys.projections import submitter_list_item

LOGGER = get_logger(__name__)
EMPTY_IDENTIFIER = UUID(int=0)


def build_router(
    *,
    model: type,
    export_item: type,
    mapping: ModuleType,
    get_manager: Callable[..., SurveyManager],
    prefix: str,
) -> APIRouter:
    router = APIRouter(dependencies=[Depends(get_current_user)])

    @router.get("")
    @router.get("/")
    def list_surveys(manager: SurveyManager = Depends(get_manager)) -> list[SurveyListItem]:
        return manager.get_survey_list()

    @router.get("/export")
    def export_surveys(manager: SurveyManager = Depends(get_manager)) -> list[export_item]:
        return manager.export_all()

    @router.get("/user/{user_id}")
    def list_for_user(user_id: int, manager: SurveyManager = Depends(get_manager)) -> list[SubmitterListItem]:
        # 該当なしでも 404 ではなく空リスト
        return [submitter_list_item(s) for s in manager.find_by_submitter_id(user_id)]

    @router.get("/{survey_identifier}")
    def get_survey(survey_identifier: str, manager: SurveyManager = Depends(get_manager)) -> model:
        # GUID でないパスは存在しないリソースとして扱う
        try:
            identifier = UUID(survey_identifier)
        except ValueError:
            raise HTTPException(status_code=404, detail="survey not found")
        s = manager.find_by_survey_id(identifier)
        if not s:
            raise HTTPException(status_code=404, detail="survey not found")
        return mapping.entity_to_model(s)

    @router.post("", status_code=status.HTTP_201_CREATED)
    @router.post("/", status_code=status.HTTP_201_CREATED)
    def create_survey(
        response: Response,
        payload: Optional[model] = Body(default=None),
        user: CurrentUser = Depends(get_current_user),
        manager: SurveyManager = Depends(get_manager),
    ) -> model:
        if payload is None:
            raise HTTPException(status_code=400, detail="null input")

        identifier = manager.new_identifier()
        entity = mapping.to_pending_survey(payload, identifier, submitted_by=user.user_id)
        entity = manager.create(entity)
        response.headers["Location"] = f"{prefix}/{identifier}"
        return mapping.entity_to_model(entity)

    @router.put("/{survey_identifier}")
    def update_survey(
        survey_identifier: UUID,
        background_tasks: BackgroundTasks,
        payload: Optional[model] = Body(default=None),
        user: CurrentUser = Depends(get_current_user),
        manager: SurveyManager = Depends(get_manager),
    ) -> model:
        if payload is None:
            raise HTTPException(status_code=400, detail="null input")
        if survey_identifier == EMPTY_IDENTIFIER:
            raise HTTPException(status_code=400, detail="Invalid Survey Identifier")

        # completed が finished より優先
        if payload.completed:
            entity = mapping.to_completed_survey(payload, survey_identifier, submitted_by=user.user_id)
            result = manager.update(entity)
        else:
            entity = mapping.to_pending_survey(payload, survey_identifier, submitted_by=user.user_id)
            if payload.finished:
                result = manager.finish(entity)
                # 通知メールはレスポンス返却後に送る
                background_tasks.add_task(manager.send_notifications)
            else:
                result = manager.update(entity)

        LOGGER.debug("PUT %s %s by user %s", prefix, survey_identifier, user.user_id)
        return mapping.entity_to_model(result)

    return router
