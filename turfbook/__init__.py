"""
Turf Booking API

A FastAPI backend for user accounts and appointment booking, with
token authentication, one-time-code password resets and role-based access.
"""

__version__ = "1.0.0"
