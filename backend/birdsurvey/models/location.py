# backend/birdsurvey/models/location.py
from sqlalchemy import Integer, String, Column
from .base import Base


class Location(Base):
    __tablename__ = "locations"
    id = Column(Integer, primary_key=True)
    site_code = Column(String, nullable=False, unique=True)
    site_name = Column(String, nullable=False)
