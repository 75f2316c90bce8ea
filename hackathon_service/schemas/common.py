# hackathon_service/schemas/common.py
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (both accepted on input)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """The success half of the ``{success, data?, message?, error?}`` envelope."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class LookupOption(CamelModel):
    id: int
    label: str
