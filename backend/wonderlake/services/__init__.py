"""Services exports."""
from wonderlake.services.address_check import (
    AddressChecker,
    AddressCheckOutcome,
    AddressSuggestion,
    InvalidAddressError,
    SearchRecord,
)

__all__ = [
    "AddressChecker",
    "AddressCheckOutcome",
    "AddressSuggestion",
    "InvalidAddressError",
    "SearchRecord",
]
