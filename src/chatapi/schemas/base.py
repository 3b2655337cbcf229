from datetime import datetime, timezone
from typing import Annotated
from pydantic import AfterValidator, BaseModel, ConfigDict


def _assume_utc(value: datetime) -> datetime:
    # some backends (SQLite) hand timestamps back without tzinfo; they are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]


class ORMBase(BaseModel):
    """Base schema enabling attribute (ORM) population for Pydantic v2 models.

    Inherit from this class for any read/response schema that will be constructed
    directly from ORM objects rather than plain dicts.
    """
    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx produced by the API."""
    error: str
