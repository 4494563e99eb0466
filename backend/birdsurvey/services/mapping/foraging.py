# backend/birdsurvey/services/mapping/foraging.py
"""Waterbird foraging survey <-> wire model mapping."""

from __future__ import annotations

from uuid import UUID

from birdsurvey.models.observation import Observation
from birdsurvey.models.survey import Survey, SurveyStatus, SurveyType
from birdsurvey.schemas.observation import ObservationModel
from birdsurvey.schemas.survey import WaterbirdForagingModel

from .common import add_disturbances, disturbance_models, header_fields, new_survey


def entity_to_model(survey: Survey) -> WaterbirdForagingModel:
    return WaterbirdForagingModel(
        **header_fields(survey),
        temperature=survey.start_temperature,
        tide_id=survey.tide_id,
        weather_id=survey.weather_id,
        water_height_id=survey.water_height_id,
        wind_speed=survey.wind_speed,
        observations=[
            ObservationModel(
                observation_id=o.id,
                bird_species_id=o.bird_species_id,
                adults=o.bin1,
                juveniles=o.bin2,
                primary_activity_id=o.primary_activity_id,
                secondary_activity_id=o.secondary_activity_id,
                habitat_id=o.habitat_type_id,
                feeding_id=o.feeding_success_rate,
            )
            for o in survey.observations
        ],
        disturbances=disturbance_models(survey),
    )


def _to_survey(model: WaterbirdForagingModel, identifier: UUID, status: SurveyStatus, submitted_by: int) -> Survey:
    survey = new_survey(
        model,
        identifier,
        survey_type=SurveyType.FORAGING,
        status=status,
        submitted_by=submitted_by,
    )
    survey.start_temperature = model.temperature
    survey.tide_id = model.tide_id
    survey.weather_id = model.weather_id
    survey.water_height_id = model.water_height_id
    survey.wind_speed = model.wind_speed

    for o in model.observations:
        survey.observations.append(
            Observation(
                id=o.observation_id,
                bird_species_id=o.bird_species_id,
                bin1=o.adults,
                bin2=o.juveniles,
                primary_activity_id=o.primary_activity_id,
                secondary_activity_id=o.secondary_activity_id,
                habitat_type_id=o.habitat_id,
                feeding_success_rate=o.feeding_id,
                survey_identifier=identifier,
            )
        )
    add_disturbances(survey, model.disturbances, identifier)
    return survey


def to_pending_survey(model: WaterbirdForagingModel, identifier: UUID, submitted_by: int) -> Survey:
    return _to_survey(model, identifier, SurveyStatus.PENDING, submitted_by)


def to_completed_survey(model: WaterbirdForagingModel, identifier: UUID, submitted_by: int) -> Survey:
    return _to_survey(model, identifier, SurveyStatus.COMPLETED, submitted_by)
