"""Common Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResource(BaseModel):
    """Error body returned for every failed request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: int
    message: str
    stack_trace: str | None = Field(None, alias="stackTrace")
