# backend/birdsurvey/api/deps.py
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from birdsurvey.config import Settings, get_settings
from birdsurvey.db import get_db
from birdsurvey.models.survey import SurveyType
from birdsurvey.services.notify.email import EmailNotifier, build_notifier
from birdsurvey.services.surveys.manager import SurveyManager


def get_notifier(settings: Settings = Depends(get_settings)) -> Optional[EmailNotifier]:
    return build_notifier(settings)


def get_foraging_manager(
    db: Session = Depends(get_db),
    notifier: Optional[EmailNotifier] = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> SurveyManager:
    return SurveyManager(db, SurveyType.FORAGING, notifier=notifier, settings=settings)


def get_rookery_manager(
    db: Session = Depends(get_db),
    notifier: Optional[EmailNotifier] = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> SurveyManager:
    return SurveyManager(db, SurveyType.ROOKERY, notifier=notifier, settings=settings)
