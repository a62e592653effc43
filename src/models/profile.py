"""Employee profile model."""

from sqlalchemy import Column, Enum, Integer, String

from src.database import Base
from src.models.enums import ProfileRole
from src.models.mixins import TimestampMixin


class Profile(Base, TimestampMixin):
    """Employee profile, keyed by the identity provider's subject id."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    full_name = Column(String(255), nullable=True)
    role = Column(
        Enum(
            ProfileRole,
            name="profilerole",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ProfileRole.EMPLOYEE,
        nullable=False,
    )
