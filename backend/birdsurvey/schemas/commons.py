# backend/birdsurvey/schemas/commons.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for request/response bodies.

    JSON keys are camelCase (``surveyIdentifier``); snake_case is accepted on
    input as well so Python callers can build models by attribute name.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
