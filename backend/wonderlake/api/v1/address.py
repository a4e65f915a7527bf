"""Address check and boundary API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.config import get_settings
from wonderlake.database import get_db
from wonderlake.geo.boundaries import LAYER_FILES
from wonderlake.geo.geocoder import BoundingBox
from wonderlake.geo.normalizer import AddressNormalizer
from wonderlake.schemas.address import (
    AddressCheckRequest,
    AddressCheckResponse,
    AddressSuggestionSchema,
    SearchedAddressCreate,
)
from wonderlake.services.address_check import (
    AddressChecker,
    AddressCheckOutcome,
    AddressSuggestion,
    InvalidAddressError,
    SearchRecord,
)
from wonderlake.services.analytics import save_searched_address, session_recorder

router = APIRouter(tags=["Address Check"])
settings = get_settings()
logger = logging.getLogger("wonderlake.api.address")


def get_address_checker(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AddressChecker:
    """Request-scoped checker over the process-wide geocoder and polygons."""
    return AddressChecker(
        geocoder=request.app.state.geocoder,
        classifier=request.app.state.classifier,
        normalizer=AddressNormalizer(
            town=settings.LOCALITY_TOWN,
            state=settings.LOCALITY_STATE,
            state_name=settings.LOCALITY_STATE_NAME,
            county=settings.LOCALITY_COUNTY,
        ),
        recorder=session_recorder(db),
        bbox=BoundingBox.from_lon_lat(settings.GEOCODER_BBOX),
        request_delay=settings.GEOCODER_REQUEST_DELAY_SECONDS,
        max_suggestions=settings.MAX_ADDRESS_SUGGESTIONS,
    )


def _to_response(outcome: AddressCheckOutcome) -> AddressCheckResponse:
    return AddressCheckResponse(
        address=outcome.address,
        result=outcome.result,
        municipality_name=outcome.municipality_name,
        latitude=outcome.latitude,
        longitude=outcome.longitude,
        display_name=outcome.display_name,
        matched_query=outcome.matched_query,
        distance_miles=outcome.distance_miles,
        suggestions=[
            AddressSuggestionSchema(
                display_name=s.display_name,
                latitude=s.latitude,
                longitude=s.longitude,
                distance_miles=s.distance_miles,
            )
            for s in outcome.suggestions
        ],
        message=outcome.message,
    )


@router.post("/address-check", response_model=AddressCheckResponse)
async def check_address(
    data: AddressCheckRequest,
    checker: AddressChecker = Depends(get_address_checker),
):
    """
    Classify a free-text address against the village and annexation zone.

    Returns a suggestion list instead of a match when nothing resolved
    inside the service area.
    """
    try:
        outcome = await checker.check(data.address)
    except InvalidAddressError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return _to_response(outcome)


@router.post("/address-check/suggestion", response_model=AddressCheckResponse)
async def check_suggestion(
    data: AddressSuggestionSchema,
    checker: AddressChecker = Depends(get_address_checker),
):
    """Classify a suggestion previously offered by ``/address-check``."""
    outcome = await checker.check_suggestion(
        AddressSuggestion(
            display_name=data.display_name,
            latitude=data.latitude,
            longitude=data.longitude,
            distance_miles=data.distance_miles,
        )
    )
    return _to_response(outcome)


@router.post("/searched-address", status_code=status.HTTP_201_CREATED)
async def create_searched_address(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Record an address lookup for analytics.

    Fire-and-forget: invalid payloads and write failures are logged and the
    caller is still told the request succeeded.
    """
    try:
        data = SearchedAddressCreate.model_validate(await request.json())
        await save_searched_address(
            db,
            SearchRecord(
                address=data.address,
                result=data.result,
                municipality_name=data.municipality_name,
                latitude=data.latitude,
                longitude=data.longitude,
            ),
        )
    except Exception as e:
        await db.rollback()
        logger.warning(f"Discarding searched address analytics write: {e}")
    return {"success": True}


@router.get("/boundaries/{layer}")
async def get_boundaries(layer: str, request: Request):
    """Bundled boundary layer as a GeoJSON FeatureCollection."""
    documents = request.app.state.boundaries.documents or {}
    if layer not in LAYER_FILES or layer not in documents:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown boundary layer. Expected one of: {', '.join(LAYER_FILES)}",
        )
    return documents[layer]
