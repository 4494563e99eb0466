# backend/tests/test_survey_manager.py
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from birdsurvey.config import Settings
from birdsurvey.errors import PersistenceUnavailableError, SurveyNotFoundError, SurveyValidationError
from birdsurvey.models.survey import SurveyStatus, SurveyType
from birdsurvey.schemas.survey import RookeryCensusModel, WaterbirdForagingModel
from birdsurvey.services.mapping import foraging, rookery
from birdsurvey.services.surveys.manager import SurveyManager


class RecordingNotifier:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, notification):
        if self.error is not None:
            raise self.error
        self.sent.append(notification)


@pytest.fixture()
def settings():
    return Settings(reviewer_email="reviewer@example.org", notification_from_email="surveys@example.org")


@pytest.fixture()
def manager(db, settings):
    return SurveyManager(db, SurveyType.FORAGING, settings=settings)


def _pending(payload, identifier, **changes):
    model = WaterbirdForagingModel.model_validate(dict(payload, **changes))
    return foraging.to_pending_survey(model, identifier, submitted_by=7)


def _completed(payload, identifier, **changes):
    model = WaterbirdForagingModel.model_validate(dict(payload, **changes))
    return foraging.to_completed_survey(model, identifier, submitted_by=7)


def test_create_assigns_surrogate_ids(manager, foraging_payload):
    identifier = manager.new_identifier()
    payload = dict(foraging_payload, surveyId=999)
    payload["observations"] = [dict(foraging_payload["observations"][0], observationId=555)]

    created = manager.create(_pending(payload, identifier))

    assert created.id is not None and created.id != 999
    assert created.observations[0].id != 555
    assert created.status == SurveyStatus.PENDING.value
    assert manager.find_by_survey_id(identifier).id == created.id


def test_new_identifier_is_unique(manager):
    assert manager.new_identifier() != manager.new_identifier()


def test_create_without_location_is_a_validation_error(manager, foraging_payload):
    with pytest.raises(SurveyValidationError):
        manager.create(_pending(foraging_payload, manager.new_identifier(), locationId=None))


def test_create_rejects_other_survey_type(manager, rookery_payload):
    census = rookery.to_pending_survey(RookeryCensusModel.model_validate(rookery_payload), uuid.uuid4(), submitted_by=7)
    with pytest.raises(SurveyValidationError):
        manager.create(census)


def test_lookups_return_empty_results(manager):
    assert manager.find_by_survey_id(uuid.uuid4()) is None
    assert manager.find_by_submitter_id(12345) == []


def test_update_unknown_survey_raises_not_found(manager, foraging_payload):
    with pytest.raises(SurveyNotFoundError):
        manager.update(_pending(foraging_payload, uuid.uuid4()))


def test_update_merges_children_by_id(manager, foraging_payload):
    identifier = manager.new_identifier()
    second = dict(foraging_payload["observations"][0], birdSpeciesId=102)
    created = manager.create(
        _pending(dict(foraging_payload, observations=[foraging_payload["observations"][0], second]), identifier)
    )
    kept_id = created.observations[0].id

    edited = dict(foraging_payload["observations"][0], observationId=kept_id, adults=11)
    added = dict(foraging_payload["observations"][0], birdSpeciesId=103)
    updated = manager.update(
        _pending(foraging_payload, identifier, observations=[edited, added], surveyComments="windy later")
    )

    assert updated.general_comments == "windy later"
    assert [o.bird_species_id for o in updated.observations] == [101, 103]
    assert updated.observations[0].id == kept_id
    assert updated.observations[0].bin1 == 11
    assert all(o.survey_identifier == identifier for o in updated.observations)


def test_completed_is_terminal(manager, foraging_payload):
    identifier = manager.new_identifier()
    manager.create(_pending(foraging_payload, identifier))

    completed = manager.update(_completed(foraging_payload, identifier))
    assert completed.status == SurveyStatus.COMPLETED.value

    again = manager.update(_pending(foraging_payload, identifier, observers="someone else"))
    assert again.status == SurveyStatus.COMPLETED.value
    assert again.observers == "someone else"

    with pytest.raises(SurveyValidationError):
        manager.finish(_pending(foraging_payload, identifier))


def test_finish_marks_survey_and_notifies_reviewer(db, settings, foraging_payload):
    notifier = RecordingNotifier()
    manager = SurveyManager(db, SurveyType.FORAGING, notifier=notifier, settings=settings)
    identifier = manager.new_identifier()
    manager.create(_pending(foraging_payload, identifier))

    finished = manager.finish(_pending(foraging_payload, identifier))

    assert finished.status == SurveyStatus.FINISHED.value
    assert notifier.sent == []
    assert manager.send_notifications() == 1
    assert manager.outbox == []
    assert len(notifier.sent) == 1
    notice = notifier.sent[0]
    assert notice.to == "reviewer@example.org"
    assert notice.from_email == "surveys@example.org"
    assert str(identifier) in notice.body
    assert "Galveston Bay North" in notice.body


def test_finish_survives_notification_failure(db, settings, foraging_payload):
    manager = SurveyManager(db, SurveyType.FORAGING, notifier=RecordingNotifier(OSError("relay down")), settings=settings)
    identifier = manager.new_identifier()
    manager.create(_pending(foraging_payload, identifier))

    assert manager.finish(_pending(foraging_payload, identifier)).finished
    assert manager.send_notifications() == 0
    assert manager.outbox == []


def test_refinishing_does_not_queue_another_notice(db, settings, foraging_payload):
    notifier = RecordingNotifier()
    manager = SurveyManager(db, SurveyType.FORAGING, notifier=notifier, settings=settings)
    identifier = manager.new_identifier()
    manager.create(_pending(foraging_payload, identifier))

    manager.finish(_pending(foraging_payload, identifier))
    manager.finish(_pending(foraging_payload, identifier, observers="second pass"))
    assert len(manager.outbox) == 1

    # 編集で pending に戻ってから再度 finish すれば再通知
    manager.update(_pending(foraging_payload, identifier))
    manager.finish(_pending(foraging_payload, identifier))
    assert manager.send_notifications() == 2


def test_finish_without_notifier_queues_nothing(manager, foraging_payload):
    identifier = manager.new_identifier()
    manager.create(_pending(foraging_payload, identifier))

    manager.finish(_pending(foraging_payload, identifier))

    assert manager.outbox == []
    assert manager.send_notifications() == 0


def test_survey_list_is_scoped_to_type(db, manager, foraging_payload, rookery_payload):
    manager.create(_pending(foraging_payload, manager.new_identifier()))
    done = manager.new_identifier()
    manager.create(_completed(foraging_payload, done))
    census_manager = SurveyManager(db, SurveyType.ROOKERY)
    census_manager.create(
        rookery.to_pending_survey(RookeryCensusModel.model_validate(rookery_payload), uuid.uuid4(), submitted_by=7)
    )

    items = manager.get_survey_list()

    assert [item.status for item in items] == ["pending", "completed"]
    assert items[0].site_code == "GB-01"
    assert items[0].site_name == "Galveston Bay North"
    assert items[0].start_date == "5/1/2020"
    assert len(census_manager.get_survey_list()) == 1


def test_export_all_covers_completed_surveys_only(manager, foraging_payload):
    manager.create(_pending(foraging_payload, manager.new_identifier()))
    two_rows = manager.new_identifier()
    extra = dict(foraging_payload["observations"][0], birdSpeciesId=150, adults=1)
    manager.create(
        _completed(foraging_payload, two_rows, observations=[foraging_payload["observations"][0], extra])
    )
    no_rows = manager.new_identifier()
    manager.create(_completed(foraging_payload, no_rows, observations=[]))

    items = manager.export_all()

    assert [item.survey_identifier for item in items] == [two_rows, two_rows, no_rows]
    assert [item.bird_species_id for item in items] == [101, 150, None]
    assert items[0].adults == 4
    assert items[0].juveniles == 2
    assert items[0].site_code == "GB-01"
    assert items[0].start_time == "7:05 AM"
    assert items[0].disturbance_count == 1


def test_database_errors_become_persistence_unavailable():
    empty = sessionmaker(bind=create_engine("sqlite://"))()
    manager = SurveyManager(empty, SurveyType.FORAGING, settings=Settings())
    with pytest.raises(PersistenceUnavailableError):
        manager.find_by_survey_id(uuid.uuid4())
