# backend/birdsurvey/schemas/survey.py
from typing import List, Optional
from uuid import UUID

from .commons import WireModel
from .observation import DisturbanceModel, ObservationModel, RookeryObservationModel


class SurveyModelBase(WireModel):
    # 日付・時刻はクライアント入力のまま文字列で受け取る（解析は mapping 側）
    survey_id: Optional[int] = None
    survey_identifier: Optional[UUID] = None
    location_id: Optional[int] = None
    site_type_id: Optional[int] = None
    access_point_id: Optional[int] = None
    vantage_point_id: Optional[int] = None
    observers: str = ""
    survey_comments: str = ""
    disturbance_comments: str = ""
    start_date: str = ""
    start_time: str = ""
    end_time: str = ""
    completed: bool = False
    finished: bool = False
    disturbances: List[DisturbanceModel] = []


class WaterbirdForagingModel(SurveyModelBase):
    temperature: Optional[int] = None
    tide_id: Optional[int] = None
    weather_id: Optional[int] = None
    water_height_id: Optional[int] = None
    wind_speed: Optional[int] = None
    observations: List[ObservationModel] = []


class RookeryCensusModel(SurveyModelBase):
    prep_time_hours: Optional[int] = None
    observations: List[RookeryObservationModel] = []


class SubmitterListItem(WireModel):
    """Row of a submitter's own survey list (``missing`` when unknown)."""

    location: str
    start_date: str
    status: str  # Complete|Pending
    survey_comments: str = ""
    survey_identifier: UUID


class SurveyListItem(WireModel):
    survey_identifier: UUID
    site_code: str
    site_name: str
    start_date: str
    observers: str = ""
    status: str  # pending|finished|completed
    submitted_by: int


class ForagingExportItem(WireModel):
    survey_identifier: UUID
    site_code: str = ""
    site_name: str = ""
    start_date: str = ""
    start_time: str = ""
    end_time: str = ""
    observers: str = ""
    site_type_id: Optional[int] = None
    access_point_id: Optional[int] = None
    vantage_point_id: Optional[int] = None
    tide_id: Optional[int] = None
    weather_id: Optional[int] = None
    water_height_id: Optional[int] = None
    wind_speed: Optional[int] = None
    temperature: Optional[int] = None
    survey_comments: str = ""
    disturbance_comments: str = ""
    disturbance_count: int = 0
    bird_species_id: Optional[int] = None
    adults: Optional[int] = None
    juveniles: Optional[int] = None
    primary_activity_id: Optional[int] = None
    secondary_activity_id: Optional[int] = None
    habitat_id: Optional[int] = None
    feeding_id: Optional[int] = None


class RookeryExportItem(WireModel):
    survey_identifier: UUID
    site_code: str = ""
    site_name: str = ""
    start_date: str = ""
    start_time: str = ""
    end_time: str = ""
    observers: str = ""
    site_type_id: Optional[int] = None
    access_point_id: Optional[int] = None
    vantage_point_id: Optional[int] = None
    prep_time_hours: Optional[int] = None
    survey_comments: str = ""
    disturbance_comments: str = ""
    disturbance_count: int = 0
    bird_species_id: Optional[int] = None
    adults: Optional[int] = None
    chicks_present: Optional[bool] = None
    nests_present: Optional[bool] = None
    fledglings_present: Optional[bool] = None
