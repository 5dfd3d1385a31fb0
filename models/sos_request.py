# app/models/sos_request.py
from sqlalchemy import Column, Integer, Text, DateTime, func, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
import enum

from models.base import Base


class SOSType(str, enum.Enum):
    RESCUE = "rescue"
    FOOD = "food"
    MEDICINE = "medicine"
    EVACUATION = "evacuation"


class SOSStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"  # terminal


# forward-only lifecycle: state -> the single state it may advance to
SOS_TRANSITIONS = {
    SOSStatus.PENDING: SOSStatus.ACCEPTED,
    SOSStatus.ACCEPTED: SOSStatus.COMPLETED,
}


def _values(enum_cls):
    return [m.value for m in enum_cls]


class SOSRequest(Base):
    __tablename__ = "sos_requests"

    id = Column(Integer, primary_key=True)

    # creator, set once at creation
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type = Column(Enum(SOSType, name="sos_type", values_callable=_values), nullable=False)
    location = Column(JSON, nullable=False)  # {lat, lng, address}
    description = Column(Text, nullable=True)

    status = Column(
        Enum(SOSStatus, name="sos_status", values_callable=_values),
        default=SOSStatus.PENDING,
        nullable=False,
        index=True,
    )

    # set only by accept, together with status; kept when the volunteer's
    # account is deleted so accepted/completed requests still name who handled them
    assigned_volunteer_id = Column(Integer, nullable=True, index=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # relationships
    user = relationship(
        "User",
        foreign_keys=[user_id],
        back_populates="sos_requests",
        lazy="selectin",
    )
    assigned_volunteer = relationship(
        "User",
        primaryjoin="foreign(SOSRequest.assigned_volunteer_id) == User.id",
        viewonly=True,
        lazy="selectin",
    )
