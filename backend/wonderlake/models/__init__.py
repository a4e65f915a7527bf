"""Model exports."""
from wonderlake.models.user import User
from wonderlake.models.address import SearchedAddress
from wonderlake.models.crm import InterestedParty, Contact
from wonderlake.models.community import CommunityQuestion, DynamicFaq
from wonderlake.models.email import EmailCorrespondence, InboundEmail, EmailUsage

__all__ = [
    "User",
    "SearchedAddress",
    "InterestedParty",
    "Contact",
    "CommunityQuestion",
    "DynamicFaq",
    "EmailCorrespondence",
    "InboundEmail",
    "EmailUsage",
]
