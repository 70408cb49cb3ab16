"""
Domain layer for the parking reservation lifecycle.

Structure:
- entities/: slot fields, reservations, tickets and staged bookings
- value_objects/: tariff and stay duration
- errors.py: domain exceptions carrying their HTTP status
"""
