"""API v1 router aggregation."""
from fastapi import APIRouter

from wonderlake.api.v1.auth import router as auth_router
from wonderlake.api.v1.address import router as address_router
from wonderlake.api.v1.interest import router as interest_router
from wonderlake.api.v1.faqs import router as faqs_router
from wonderlake.api.v1.tax import router as tax_router
from wonderlake.api.v1.meta import router as meta_router
from wonderlake.api.v1.admin import router as admin_router
from wonderlake.api.v1.contacts import router as contacts_router
from wonderlake.api.v1.emails import router as emails_router

router = APIRouter()

router.include_router(auth_router)
router.include_router(address_router)
router.include_router(interest_router)
router.include_router(faqs_router)
router.include_router(tax_router)
router.include_router(meta_router)
router.include_router(admin_router)
router.include_router(contacts_router)
router.include_router(emails_router)
