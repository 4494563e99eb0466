# backend/birdsurvey/models/disturbance.py
from sqlalchemy import Integer, String, Column, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class Disturbance(Base):
    __tablename__ = "disturbances"
    id = Column(Integer, primary_key=True)
    survey_id = Column(Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False)
    survey_identifier = Column(Uuid, nullable=False, index=True)
    disturbance_type_id = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    quantity = Column(Integer, nullable=True)
    result = Column(String, default="")  # 行動・反応の自由記述

    survey = relationship("Survey", back_populates="disturbances")
