"""Pydantic schemas for address checks and searched-address analytics."""
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID
from pydantic import AliasChoices, BaseModel, Field, field_validator

from wonderlake.geo.classifier import AddressResult


class AddressCheckRequest(BaseModel):
    """Free-text address entered by a visitor."""
    address: str = Field(default="", max_length=500)


class AddressSuggestionSchema(BaseModel):
    """Nearby alternative offered when an address did not resolve in range."""
    display_name: str = Field(min_length=1, max_length=500)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    distance_miles: float = Field(default=0.0, ge=0)

    class Config:
        from_attributes = True


class AddressCheckResponse(BaseModel):
    """Outcome of one address check."""
    address: str
    result: AddressResult
    municipality_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    display_name: Optional[str] = None
    matched_query: Optional[str] = None
    distance_miles: Optional[float] = None
    suggestions: List[AddressSuggestionSchema] = []
    message: Optional[str] = None

    class Config:
        from_attributes = True


class SearchedAddressCreate(BaseModel):
    """Analytics write posted by the browser after a client-side check."""
    address: str = Field(min_length=1, max_length=500)
    result: AddressResult
    municipality_name: Optional[str] = Field(
        default=None,
        max_length=100,
        validation_alias=AliasChoices("municipality_name", "municipalityName"),
    )
    latitude: Optional[str] = Field(default=None, max_length=32)
    longitude: Optional[str] = Field(default=None, max_length=32)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coordinate_as_text(cls, value: Union[str, float, int, None]):
        if value is None or value == "":
            return None
        return str(value)


class SearchedAddressResponse(BaseModel):
    id: UUID
    address: str
    result: str
    municipality_name: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SearchedAddressSummary(BaseModel):
    """Counts per result tag."""
    total: int
    by_result: dict[str, int]
