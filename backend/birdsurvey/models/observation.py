# backend/birdsurvey/models/observation.py
from sqlalchemy import Integer, Boolean, Column, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class Observation(Base):
    __tablename__ = "observations"
    id = Column(Integer, primary_key=True)
    survey_id = Column(Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False)
    survey_identifier = Column(Uuid, nullable=False, index=True)
    bird_species_id = Column(Integer, nullable=False)
    primary_activity_id = Column(Integer, nullable=True)
    secondary_activity_id = Column(Integer, nullable=True)
    habitat_type_id = Column(Integer, nullable=True)
    feeding_success_rate = Column(Integer, nullable=True)
    # foraging: bin1=adults, bin2=juveniles / rookery: bin3=adults
    bin1 = Column(Integer, nullable=True)
    bin2 = Column(Integer, nullable=True)
    bin3 = Column(Integer, nullable=True)
    chicks_present = Column(Boolean, nullable=True)
    nest_present = Column(Boolean, nullable=True)
    fledgling_present = Column(Boolean, nullable=True)

    survey = relationship("Survey", back_populates="observations")
