# backend/birdsurvey/errors.py
"""Error types raised by the survey services.

The API layer maps each type to a status code (see ``main.py``):
validation -> 400, not found -> 404, persistence unavailable -> 503.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID


class SurveyError(Exception):
    """Base class for survey service failures."""


class SurveyValidationError(SurveyError):
    pass


class SurveyNotFoundError(SurveyError):
    def __init__(self, survey_identifier: UUID, message: Optional[str] = None) -> None:
        self.survey_identifier = survey_identifier
        super().__init__(message or f"survey {survey_identifier} not found")


class PersistenceUnavailableError(SurveyError):
    """The database could not be reached; the request may be retried."""
