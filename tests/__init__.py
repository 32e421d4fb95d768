"""
Test suite for the Turf Booking API.

Contains integration tests for accounts, password resets and appointments.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
