from pydantic import BaseModel, ConfigDict
from typing import Optional, Union
from datetime import datetime

from ..models.appointment import AppointmentStatus
from .user import UserSummary


class AppointmentCreate(BaseModel):
    slot_date: Optional[str] = None  # "DD/MM/YYYY"
    slot_range_time: Optional[str] = None
    approx_amount: Optional[Union[float, str]] = None


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    booking_date: datetime
    slot_date: datetime
    slot_range_time: str
    approx_amount: float
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AppointmentWithUser(AppointmentResponse):
    """Admin view: the owner's public fields are attached."""

    user: UserSummary
