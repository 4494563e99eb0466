# backend/birdsurvey/services/surveys/manager.py
"""Survey lifecycle operations.

``SurveyManager`` is the only place that writes surveys. One instance is
scoped to a database session and a survey type; routers get one per request
through ``birdsurvey.api.deps``.

Lifecycle::

    pending --update--> pending
    pending --finish--> finished      (reviewer e-mail queued, if configured)
    pending/finished --update(completed entity)--> completed

A completed survey never goes back to pending or finished.
"""

from __future__ import annotations

import smtplib
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from birdsurvey.config import Settings, get_settings
from birdsurvey.errors import (
    PersistenceUnavailableError,
    SurveyNotFoundError,
    SurveyValidationError,
)
from birdsurvey.logging_utils import get_logger
from birdsurvey.models.disturbance import Disturbance
from birdsurvey.models.observation import Observation
from birdsurvey.models.survey import Survey, SurveyStatus, SurveyType
from birdsurvey.schemas.survey import SurveyListItem
from birdsurvey.services.mapping.datetimes import format_short_date
from birdsurvey.services.notify.email import EmailNotifier, NotificationModel

from .projections import EXPORT_ROWS, ExportItem, survey_list_item

LOGGER = get_logger(__name__)

# 更新時に上書きするヘッダ項目（id / survey_identifier / survey_type / status 以外）
SURVEY_FIELDS = (
    "location_id",
    "assessment_id",
    "access_point_id",
    "vantage_point_id",
    "tide_id",
    "weather_id",
    "water_height_id",
    "wind_speed",
    "start_temperature",
    "end_temperature",
    "prep_time_hours",
    "observers",
    "general_comments",
    "disturbance_comments",
    "start_date",
    "end_date",
    "submitted_by",
)
OBSERVATION_FIELDS = (
    "bird_species_id",
    "primary_activity_id",
    "secondary_activity_id",
    "habitat_type_id",
    "feeding_success_rate",
    "bin1",
    "bin2",
    "bin3",
    "chicks_present",
    "nest_present",
    "fledgling_present",
)
DISTURBANCE_FIELDS = ("disturbance_type_id", "duration_minutes", "quantity", "result")


class SurveyManager:
    def __init__(
        self,
        db: Session,
        survey_type: SurveyType,
        *,
        notifier: Optional[EmailNotifier] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.db = db
        self.survey_type = survey_type
        self.notifier = notifier
        self.settings = settings or get_settings()
        # finish() で積み、send_notifications() で送る
        self.outbox: List[NotificationModel] = []

    @staticmethod
    def new_identifier() -> UUID:
        return uuid.uuid4()

    @contextmanager
    def _persistence(self) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            LOGGER.warning("Rejected survey write: %s", exc.orig)
            raise SurveyValidationError(f"survey violates a data constraint: {exc.orig}") from exc
        except OperationalError as exc:
            self.db.rollback()
            LOGGER.error("Database unavailable: %s", exc.orig)
            raise PersistenceUnavailableError("database unavailable") from exc

    def _check_type(self, entity: Survey) -> None:
        if entity.survey_type != self.survey_type.value:
            raise SurveyValidationError(
                f"expected a {self.survey_type.value} survey, got {entity.survey_type}"
            )

    def _query(self):
        return self.db.query(Survey).filter(Survey.survey_type == self.survey_type.value)

    def create(self, entity: Survey) -> Survey:
        """Persist a new survey. Surrogate ids are always assigned by the database."""
        self._check_type(entity)
        entity.id = None
        for child in list(entity.observations) + list(entity.disturbances):
            child.id = None

        with self._persistence():
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
        LOGGER.info(
            "Created %s survey %s (status=%s, submitted_by=%s)",
            self.survey_type.value,
            entity.survey_identifier,
            entity.status,
            entity.submitted_by,
        )
        return entity

    def find_by_survey_id(self, survey_identifier: UUID) -> Optional[Survey]:
        with self._persistence():
            return self._query().filter(Survey.survey_identifier == survey_identifier).one_or_none()

    def find_by_submitter_id(self, user_id: int) -> List[Survey]:
        with self._persistence():
            return (
                self._query()
                .filter(Survey.submitted_by == user_id)
                .order_by(Survey.id.asc())
                .all()
            )

    def _require(self, survey_identifier: UUID) -> Survey:
        existing = self.find_by_survey_id(survey_identifier)
        if existing is None:
            raise SurveyNotFoundError(survey_identifier)
        return existing

    def update(self, entity: Survey) -> Survey:
        """Overwrite the stored survey with the same ``survey_identifier``.

        The stored status follows ``entity.status`` unless the stored survey
        is already completed.
        """
        self._check_type(entity)
        existing = self._require(entity.survey_identifier)
        self._apply(existing, entity)
        if not existing.completed:
            existing.status = entity.status

        with self._persistence():
            self.db.commit()
            self.db.refresh(existing)
        LOGGER.info("Updated %s survey %s (status=%s)", self.survey_type.value, existing.survey_identifier, existing.status)
        return existing

    def finish(self, entity: Survey) -> Survey:
        """Mark a pending survey as finished: editing done, not yet verified.

        The reviewer notice is only queued in ``outbox``, and only when the
        survey was not finished already; ``send_notifications`` delivers it.
        """
        self._check_type(entity)
        existing = self._require(entity.survey_identifier)
        if existing.completed:
            raise SurveyValidationError(f"survey {existing.survey_identifier} is already completed")
        was_finished = existing.finished
        self._apply(existing, entity)
        existing.status = SurveyStatus.FINISHED.value

        with self._persistence():
            self.db.commit()
            self.db.refresh(existing)
        LOGGER.info("Finished %s survey %s", self.survey_type.value, existing.survey_identifier)
        if not was_finished:
            self._queue_finished(existing)
        return existing

    def send_notifications(self) -> int:
        """Deliver queued notices. Failures are logged; returns the number sent."""
        sent = 0
        while self.outbox:
            notification = self.outbox.pop(0)
            try:
                self.notifier.send(notification)
            except (smtplib.SMTPException, OSError):
                # 保存は完了済み。通知失敗はリクエストを失敗させない
                LOGGER.exception("Could not send notification to %s: %s", notification.to, notification.subject)
                continue
            sent += 1
        return sent

    def get_survey_list(self) -> List[SurveyListItem]:
        with self._persistence():
            rows = self._query().order_by(Survey.id.asc()).all()
        return [survey_list_item(s) for s in rows]

    def export_all(self) -> List[ExportItem]:
        with self._persistence():
            rows = (
                self._query()
                .filter(Survey.status == SurveyStatus.COMPLETED.value)
                .order_by(Survey.id.asc())
                .all()
            )
        to_rows = EXPORT_ROWS[self.survey_type]
        items: List[ExportItem] = []
        for s in rows:
            items.extend(to_rows(s))
        LOGGER.debug("Exporting %s rows from %s completed surveys", len(items), len(rows))
        return items

    def _apply(self, existing: Survey, entity: Survey) -> None:
        for name in SURVEY_FIELDS:
            setattr(existing, name, getattr(entity, name))
        existing.observations = _merge_children(
            existing.observations, entity.observations, Observation, OBSERVATION_FIELDS, existing.survey_identifier
        )
        existing.disturbances = _merge_children(
            existing.disturbances, entity.disturbances, Disturbance, DISTURBANCE_FIELDS, existing.survey_identifier
        )

    def _queue_finished(self, survey: Survey) -> None:
        reviewer = self.settings.reviewer_email
        if self.notifier is None or not reviewer:
            return
        label = "Waterbird foraging survey" if self.survey_type is SurveyType.FORAGING else "Rookery census"
        notification = NotificationModel(
            to=reviewer,
            subject=f"{label} ready for review",
            body=(
                f"{label} {survey.survey_identifier} "
                f"({survey.location_name or 'location ' + str(survey.location_id)}, "
                f"{format_short_date(survey.start_date) or 'no date'}) "
                f"was marked finished by user {survey.submitted_by}."
            ),
            from_email=self.settings.notification_from_email,
            from_name=self.settings.notification_from_name,
        )
        self.outbox.append(notification)


def _merge_children(current, incoming, model, fields, survey_identifier) -> list:
    """Reconcile a child collection by id.

    Rows whose id matches a stored child update it in place; rows without a
    matching id are inserted; stored children not present are dropped.
    """
    by_id = {child.id: child for child in current}
    merged = []
    for row in incoming:
        target = by_id.get(row.id) if row.id is not None else None
        if target is None:
            target = model()
        for name in fields:
            setattr(target, name, getattr(row, name))
        target.survey_identifier = survey_identifier
        merged.append(target)
    return merged
