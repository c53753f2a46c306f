"""ORM model registry -- import all models so Alembic and create_all discover them."""

from fundraiser_api.models.base import Base
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.models.contribution import Contribution
from fundraiser_api.models.contributor import Contributor
from fundraiser_api.models.district import District
from fundraiser_api.models.product import Product
from fundraiser_api.models.school import School
from fundraiser_api.models.state import State
from fundraiser_api.models.teacher import Teacher
from fundraiser_api.models.terms_of_service import TermsOfService
from fundraiser_api.models.user import User

__all__ = [
    "Base",
    "Campaign",
    "Contribution",
    "Contributor",
    "District",
    "Product",
    "School",
    "State",
    "Teacher",
    "TermsOfService",
    "User",
]
