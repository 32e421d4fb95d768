from .user import User, AVATAR_CHOICES
from .otp import OTP
from .appointment import Appointment, AppointmentStatus

__all__ = ["User", "AVATAR_CHOICES", "OTP", "Appointment", "AppointmentStatus"]
