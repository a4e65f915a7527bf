"""Property tax estimator API endpoints."""
from fastapi import APIRouter

from wonderlake.schemas.tax import (
    TaxBreakdownResponse,
    TaxEstimateRequest,
    TaxEstimateResponse,
)
from wonderlake.services.tax import (
    estimate_post_annexation_tax,
    tax_breakdown,
    taxing_bodies_info,
    village_tax_info,
)

router = APIRouter(tags=["Tax Estimator"])


@router.post("/tax/estimate", response_model=TaxEstimateResponse)
async def estimate_tax(data: TaxEstimateRequest):
    """Estimate the annual bill after the village levy is added."""
    return estimate_post_annexation_tax(data.eav, data.current_tax)


@router.post("/tax/breakdown", response_model=TaxBreakdownResponse)
async def breakdown_tax(data: TaxEstimateRequest):
    """Split a bill across the taxing bodies, plus the village levy."""
    return tax_breakdown(data.eav, data.current_tax)


@router.get("/village-tax-info")
async def get_village_tax_info():
    return village_tax_info()


@router.get("/taxing-bodies")
async def get_taxing_bodies():
    return taxing_bodies_info()
