"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Draw is the aggregate root; participant entries are scoped by draw_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata holds every table and its
      ForeignKey targets before create_all or Alembic autogenerate runs
"""

from draws.models.business import Business  # noqa: F401
from draws.models.user import User  # noqa: F401
from draws.models.draw import Draw  # noqa: F401
from draws.models.draw_participant import DrawParticipant  # noqa: F401
