"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (models/base.py)
    - Company is the tenant root; all other entities scoped by company_id

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from trialengage.models.company import Company  # noqa: F401
from trialengage.models.user import User  # noqa: F401
from trialengage.models.hospital import Hospital  # noqa: F401
from trialengage.models.clinical_trial import ClinicalTrial  # noqa: F401
from trialengage.models.enrollment import Enrollment  # noqa: F401
from trialengage.models.news import News  # noqa: F401
from trialengage.models.documents import (  # noqa: F401
    PdfDocument, TrainingMaterial, StudyProtocol,
)
