from sqlalchemy.orm import Session, joinedload
from datetime import datetime
from typing import List
import logging
import math

from ..models.appointment import Appointment, AppointmentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..core.security import Identity
from ..schemas.appointment import AppointmentCreate

logger = logging.getLogger(__name__)


def parse_slot_date(raw: str) -> datetime:
    """Parse "DD/MM/YYYY" into midnight (UTC) of that day."""
    parts = raw.split("/")
    if len(parts) != 3:
        raise ValidationError("Invalid slot_date format. Use DD/MM/YYYY")

    try:
        day, month, year = (int(part) for part in parts)
        return datetime(year, month, day)
    except ValueError:
        raise ValidationError("Invalid slot_date format. Use DD/MM/YYYY")


# Largest value a signed 64-bit INTEGER column can hold
MAX_APPOINTMENT_ID = 2**63 - 1


def parse_appointment_id(raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()) or not 0 < int(raw) <= MAX_APPOINTMENT_ID:
        raise ValidationError("Invalid appointment ID")
    return int(raw)


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def create_appointment(self, identity: Identity, data: AppointmentCreate) -> Appointment:
        if not data.slot_date or not data.slot_range_time or data.approx_amount in (None, ""):
            raise ValidationError(
                "slot_date, slot_range_time and approx_amount are required"
            )

        try:
            amount = float(data.approx_amount)
        except ValueError:
            raise ValidationError("approx_amount must be a number")

        if not math.isfinite(amount):
            raise ValidationError("approx_amount must be a number")

        appointment = Appointment(
            user_id=identity.user_id,
            slot_date=parse_slot_date(data.slot_date),
            slot_range_time=data.slot_range_time,
            approx_amount=amount,
            status=AppointmentStatus.PENDING,
        )

        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"User {identity.user_id} booked appointment {appointment.id}")
        return appointment

    def list_appointments(self, identity: Identity) -> List[Appointment]:
        """Admins see every appointment; anyone else only their own."""
        query = self.db.query(Appointment)
        if identity.is_admin:
            query = query.options(joinedload(Appointment.user))
        else:
            query = query.filter(Appointment.user_id == identity.user_id)

        return query.order_by(Appointment.id).all()

    def get_appointment(self, identity: Identity, raw_id: str) -> Appointment:
        appointment_id = parse_appointment_id(raw_id)

        query = self.db.query(Appointment).filter(Appointment.id == appointment_id)
        if identity.is_admin:
            query = query.options(joinedload(Appointment.user))
        else:
            # Someone else's appointment looks exactly like a missing one
            query = query.filter(Appointment.user_id == identity.user_id)

        appointment = query.first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def approve_appointment(self, identity: Identity, raw_id: str) -> Appointment:
        """Mark an appointment approved, whatever its current status."""
        appointment_id = parse_appointment_id(raw_id)

        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found")

        appointment.status = AppointmentStatus.APPROVED
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Admin {identity.user_id} approved appointment {appointment.id}")
        return appointment
