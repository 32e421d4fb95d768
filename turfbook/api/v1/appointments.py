from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import Identity
from ...api.deps import get_current_identity, get_admin_identity
from ...models.appointment import Appointment
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentResponse, AppointmentWithUser
)

router = APIRouter(prefix="/user", tags=["Appointments"])


def serialize(appointment: Appointment, identity: Identity):
    """Admins get the owner's public fields attached."""
    if identity.is_admin:
        return AppointmentWithUser.model_validate(appointment)
    return AppointmentResponse.model_validate(appointment)


@router.post("/appointment-confirmation", status_code=status.HTTP_201_CREATED)
def confirm_appointment(
    appointment_data: AppointmentCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Book a slot; it starts out pending."""
    appointment = AppointmentService(db).create_appointment(identity, appointment_data)

    return {
        "success": True,
        "message": "Appointment booked successfully",
        "appointment": AppointmentResponse.model_validate(appointment),
    }


@router.get("/appointments")
def list_appointments(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    appointments = AppointmentService(db).list_appointments(identity)

    return {
        "success": True,
        "message": "Appointments fetched successfully",
        "appointments": [serialize(a, identity) for a in appointments],
    }


@router.get("/appointment/{appointment_id}")
def get_appointment(
    appointment_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).get_appointment(identity, appointment_id)

    return {
        "success": True,
        "message": "Appointment fetched successfully",
        "appointment": serialize(appointment, identity),
    }


@router.patch("/appointment-approve/{appointment_id}")
def approve_appointment(
    appointment_id: str,
    identity: Identity = Depends(get_admin_identity),
    db: Session = Depends(get_db)
):
    """Approve an appointment (admin only)."""
    appointment = AppointmentService(db).approve_appointment(identity, appointment_id)

    return {
        "success": True,
        "message": "Appointment approved successfully",
        "appointment": AppointmentResponse.model_validate(appointment),
    }
