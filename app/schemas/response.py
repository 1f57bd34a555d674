from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, Any


class CamelModel(BaseModel):
    """
    Base for wire models: snake_case attributes, camelCase JSON keys.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    message: str
    code: str
    details: Optional[Any] = None


class SuccessResponse(BaseModel):
    success: bool = True
