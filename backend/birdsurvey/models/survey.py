# backend/birdsurvey/models/survey.py
import enum

from sqlalchemy import Integer, String, Column, DateTime, Uuid
from sqlalchemy.orm import relationship

from .base import Base
from .observation import Observation
from .disturbance import Disturbance
from .location import Location  # noqa: F401


class SurveyType(str, enum.Enum):
    FORAGING = "foraging"
    ROOKERY = "rookery"


class SurveyStatus(str, enum.Enum):
    # pending / finished は「未完了」側、completed は確定済み
    PENDING = "pending"
    FINISHED = "finished"
    COMPLETED = "completed"


class Survey(Base):
    __tablename__ = "surveys"
    id = Column(Integer, primary_key=True)
    survey_identifier = Column(Uuid, nullable=False, unique=True, index=True)
    survey_type = Column(String, nullable=False)  # foraging|rookery
    status = Column(String, nullable=False, default=SurveyStatus.PENDING.value)  # pending|finished|completed

    # 拠点マスタは外部管理。未登録 id も受け付け、一覧では "missing" になる
    location_id = Column(Integer, nullable=False, index=True)
    assessment_id = Column(Integer, nullable=True)
    access_point_id = Column(Integer, nullable=True)
    vantage_point_id = Column(Integer, nullable=True)
    tide_id = Column(Integer, nullable=True)
    weather_id = Column(Integer, nullable=True)
    water_height_id = Column(Integer, nullable=True)
    wind_speed = Column(Integer, nullable=True)
    start_temperature = Column(Integer, nullable=True)
    end_temperature = Column(Integer, nullable=True)
    prep_time_hours = Column(Integer, nullable=True)
    observers = Column(String, default="")  # 自由記述（カンマ区切り）
    general_comments = Column(String, default="")
    disturbance_comments = Column(String, default="")
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    submitted_by = Column(Integer, nullable=False, index=True)

    location = relationship(
        "Location",
        primaryjoin="foreign(Survey.location_id) == Location.id",
        lazy="joined",
        viewonly=True,
    )
    observations = relationship(
        Observation,
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by=Observation.id,
    )
    disturbances = relationship(
        Disturbance,
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by=Disturbance.id,
    )

    @property
    def completed(self) -> bool:
        return self.status == SurveyStatus.COMPLETED.value

    @property
    def finished(self) -> bool:
        return self.status == SurveyStatus.FINISHED.value

    @property
    def location_name(self):
        return self.location.site_name if self.location is not None else None
