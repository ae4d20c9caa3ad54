"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root; tenant data is scoped by project_id

Design Decisions:
    - One file per entity for locality (layout.py holds the two layout tables)
    - All models imported here so Base.metadata is complete for create_all/alembic
"""

from photobooth.models.admin_user import AdminUser  # noqa: F401
from photobooth.models.project import Project  # noqa: F401
from photobooth.models.project_settings import ProjectSettings  # noqa: F401
from photobooth.models.style import Style  # noqa: F401
from photobooth.models.background import Background  # noqa: F401
from photobooth.models.layout import LayoutTemplate, ProjectLayout  # noqa: F401
from photobooth.models.mosaic_settings import MosaicSettings  # noqa: F401
from photobooth.models.photo_session import PhotoSession  # noqa: F401
from photobooth.models.project_image import ProjectImage  # noqa: F401
from photobooth.models.email_subscription import EmailSubscription  # noqa: F401
from photobooth.models.prediction import Prediction  # noqa: F401
