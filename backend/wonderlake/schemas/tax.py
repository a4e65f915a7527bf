"""Pydantic schemas for the tax estimator."""
from typing import List
from pydantic import BaseModel, Field


class TaxEstimateRequest(BaseModel):
    eav: float = Field(gt=0, description="Equalized Assessed Value")
    current_tax: float = Field(ge=0, description="Current annual property tax bill")


class TaxEstimateResponse(BaseModel):
    current_tax: float
    estimated_post_annexation_tax: float
    village_levy_amount: float
    village_levy_rate: float
    eav: float
    difference: float
    percent_increase: float
    monthly_increase: float


class TaxingBodyAmount(BaseModel):
    id: str
    name: str
    short_name: str
    rate: float
    description: str
    color: str
    amount: float
    percentage: float


class TaxBreakdownResponse(BaseModel):
    taxing_bodies: List[TaxingBodyAmount]
    village_levy_body: TaxingBodyAmount
    total_current_rate: float
    total_post_annexation_rate: float
