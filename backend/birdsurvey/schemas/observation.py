# backend/birdsurvey/schemas/observation.py
from typing import Optional

from .commons import WireModel


class ObservationModel(WireModel):
    """Foraging tally row. ``adults``/``juveniles`` are stored as bin1/bin2."""

    observation_id: Optional[int] = None
    bird_species_id: Optional[int] = None
    adults: Optional[int] = None
    juveniles: Optional[int] = None
    primary_activity_id: Optional[int] = None
    secondary_activity_id: Optional[int] = None
    habitat_id: Optional[int] = None
    feeding_id: Optional[int] = None


class RookeryObservationModel(WireModel):
    """Rookery census row. ``adults`` is stored as bin3."""

    observation_id: Optional[int] = None
    bird_species_id: Optional[int] = None
    adults: Optional[int] = None
    chicks_present: Optional[bool] = None
    nests_present: Optional[bool] = None
    fledglings_present: Optional[bool] = None


class DisturbanceModel(WireModel):
    disturbance_id: Optional[int] = None
    disturbance_type_id: Optional[int] = None
    duration_minutes: Optional[int] = None
    quantity: Optional[int] = None
    behavior: str = ""
