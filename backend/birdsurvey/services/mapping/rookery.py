# backend/birdsurvey/services/mapping/rookery.py
"""Rookery census <-> wire model mapping.

Census counts only adults (stored in bin3) plus presence flags for chicks,
nests and fledglings.
"""

from __future__ import annotations

from uuid import UUID

from birdsurvey.models.observation import Observation
from birdsurvey.models.survey import Survey, SurveyStatus, SurveyType
from birdsurvey.schemas.observation import RookeryObservationModel
from birdsurvey.schemas.survey import RookeryCensusModel

from .common import add_disturbances, disturbance_models, header_fields, new_survey


def entity_to_model(survey: Survey) -> RookeryCensusModel:
    return RookeryCensusModel(
        **header_fields(survey),
        prep_time_hours=survey.prep_time_hours,
        observations=[
            RookeryObservationModel(
                observation_id=o.id,
                bird_species_id=o.bird_species_id,
                adults=o.bin3,
                chicks_present=o.chicks_present,
                nests_present=o.nest_present,
                fledglings_present=o.fledgling_present,
            )
            for o in survey.observations
        ],
        disturbances=disturbance_models(survey),
    )


def _to_survey(model: RookeryCensusModel, identifier: UUID, status: SurveyStatus, submitted_by: int) -> Survey:
    survey = new_survey(
        model,
        identifier,
        survey_type=SurveyType.ROOKERY,
        status=status,
        submitted_by=submitted_by,
    )
    survey.prep_time_hours = model.prep_time_hours

    for o in model.observations:
        survey.observations.append(
            Observation(
                id=o.observation_id,
                bird_species_id=o.bird_species_id,
                bin3=o.adults,
                chicks_present=o.chicks_present,
                nest_present=o.nests_present,
                fledgling_present=o.fledglings_present,
                survey_identifier=identifier,
            )
        )
    add_disturbances(survey, model.disturbances, identifier)
    return survey


def to_pending_survey(model: RookeryCensusModel, identifier: UUID, submitted_by: int) -> Survey:
    return _to_survey(model, identifier, SurveyStatus.PENDING, submitted_by)


def to_completed_survey(model: RookeryCensusModel, identifier: UUID, submitted_by: int) -> Survey:
    return _to_survey(model, identifier, SurveyStatus.COMPLETED, submitted_by)
