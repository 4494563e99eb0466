# backend/birdsurvey/services/mapping/common.py
"""Mapping shared by every survey type: header fields and disturbances."""

from __future__ import annotations

from typing import Any, Dict, List
from uuid import UUID

from birdsurvey.models.disturbance import Disturbance
from birdsurvey.models.survey import Survey, SurveyStatus, SurveyType
from birdsurvey.schemas.observation import DisturbanceModel
from birdsurvey.schemas.survey import SurveyModelBase

from .datetimes import format_short_date, format_short_time, parse_date_time


def new_survey(
    model: SurveyModelBase,
    identifier: UUID,
    *,
    survey_type: SurveyType,
    status: SurveyStatus,
    submitted_by: int,
) -> Survey:
    """Build an unsaved survey carrying the header fields of ``model``."""
    return Survey(
        id=model.survey_id,
        survey_identifier=identifier,
        survey_type=survey_type.value,
        status=status.value,
        location_id=model.location_id,
        assessment_id=model.site_type_id,
        access_point_id=model.access_point_id,
        vantage_point_id=model.vantage_point_id,
        observers=model.observers or "",
        general_comments=model.survey_comments or "",
        disturbance_comments=model.disturbance_comments or "",
        # 終了時刻は開始日と組み合わせる（同日内の調査）
        start_date=parse_date_time(model.start_date, model.start_time),
        end_date=parse_date_time(model.start_date, model.end_time),
        submitted_by=submitted_by,
        end_temperature=None,
    )


def header_fields(survey: Survey) -> Dict[str, Any]:
    """Header fields of ``survey`` keyed by wire model attribute name."""
    return {
        "survey_id": survey.id,
        "survey_identifier": survey.survey_identifier,
        "location_id": survey.location_id,
        "site_type_id": survey.assessment_id,
        "access_point_id": survey.access_point_id,
        "vantage_point_id": survey.vantage_point_id,
        "observers": survey.observers or "",
        "survey_comments": survey.general_comments or "",
        "disturbance_comments": survey.disturbance_comments or "",
        "start_date": format_short_date(survey.start_date),
        "start_time": format_short_time(survey.start_date),
        "end_time": format_short_time(survey.end_date),
        "completed": survey.completed,
        "finished": survey.finished,
    }


def add_disturbances(survey: Survey, models: List[DisturbanceModel], identifier: UUID) -> None:
    for d in models:
        survey.disturbances.append(
            Disturbance(
                id=d.disturbance_id,
                disturbance_type_id=d.disturbance_type_id,
                duration_minutes=d.duration_minutes,
                quantity=d.quantity,
                result=d.behavior or "",
                survey_identifier=identifier,
            )
        )


def disturbance_models(survey: Survey) -> List[DisturbanceModel]:
    return [
        DisturbanceModel(
            disturbance_id=d.id,
            disturbance_type_id=d.disturbance_type_id,
            duration_minutes=d.duration_minutes,
            quantity=d.quantity,
            behavior=d.result or "",
        )
        for d in survey.disturbances
    ]
