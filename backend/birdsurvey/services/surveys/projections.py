# backend/birdsurvey/services/surveys/projections.py
"""Read-only projections of surveys for list views and data export."""

from __future__ import annotations

from typing import List, Union

from birdsurvey.models.survey import Survey, SurveyType
from birdsurvey.schemas.survey import (
    ForagingExportItem,
    RookeryExportItem,
    SubmitterListItem,
    SurveyListItem,
)
from birdsurvey.services.mapping.datetimes import format_short_date, format_short_time

MISSING = "missing"
COMPLETE = "Complete"
PENDING = "Pending"

ExportItem = Union[ForagingExportItem, RookeryExportItem]


def submitter_list_item(survey: Survey) -> SubmitterListItem:
    return SubmitterListItem(
        location=survey.location_name or MISSING,
        start_date=format_short_date(survey.start_date) or MISSING,
        status=COMPLETE if survey.completed else PENDING,
        survey_comments=survey.general_comments or "",
        survey_identifier=survey.survey_identifier,
    )


def survey_list_item(survey: Survey) -> SurveyListItem:
    location = survey.location
    return SurveyListItem(
        survey_identifier=survey.survey_identifier,
        site_code=location.site_code if location is not None else MISSING,
        site_name=location.site_name if location is not None else MISSING,
        start_date=format_short_date(survey.start_date),
        observers=survey.observers or "",
        status=survey.status,
        submitted_by=survey.submitted_by,
    )


def _export_header(survey: Survey) -> dict:
    location = survey.location
    return {
        "survey_identifier": survey.survey_identifier,
        "site_code": location.site_code if location is not None else "",
        "site_name": location.site_name if location is not None else "",
        "start_date": format_short_date(survey.start_date),
        "start_time": format_short_time(survey.start_date),
        "end_time": format_short_time(survey.end_date),
        "observers": survey.observers or "",
        "site_type_id": survey.assessment_id,
        "access_point_id": survey.access_point_id,
        "vantage_point_id": survey.vantage_point_id,
        "survey_comments": survey.general_comments or "",
        "disturbance_comments": survey.disturbance_comments or "",
        "disturbance_count": len(survey.disturbances),
    }


def foraging_export_rows(survey: Survey) -> List[ForagingExportItem]:
    header = _export_header(survey)
    header.update(
        tide_id=survey.tide_id,
        weather_id=survey.weather_id,
        water_height_id=survey.water_height_id,
        wind_speed=survey.wind_speed,
        temperature=survey.start_temperature,
    )
    if not survey.observations:
        return [ForagingExportItem(**header)]
    return [
        ForagingExportItem(
            **header,
            bird_species_id=o.bird_species_id,
            adults=o.bin1,
            juveniles=o.bin2,
            primary_activity_id=o.primary_activity_id,
            secondary_activity_id=o.secondary_activity_id,
            habitat_id=o.habitat_type_id,
            feeding_id=o.feeding_success_rate,
        )
        for o in survey.observations
    ]


def rookery_export_rows(survey: Survey) -> List[RookeryExportItem]:
    header = _export_header(survey)
    header["prep_time_hours"] = survey.prep_time_hours
    if not survey.observations:
        return [RookeryExportItem(**header)]
    return [
        RookeryExportItem(
            **header,
            bird_species_id=o.bird_species_id,
            adults=o.bin3,
            chicks_present=o.chicks_present,
            nests_present=o.nest_present,
            fledglings_present=o.fledgling_present,
        )
        for o in survey.observations
    ]


EXPORT_ROWS = {
    SurveyType.FORAGING: foraging_export_rows,
    SurveyType.ROOKERY: rookery_export_rows,
}
