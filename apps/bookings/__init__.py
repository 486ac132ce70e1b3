"""Bookings app package.

Availability checks, rental pricing and the booking lifecycle of the car
rental engine. The pure rules live in `domain`, the transactional use
cases in `application`, and `services` is the entry point for views and
Celery tasks. Overlapping bookings for a vehicle are prevented by
re-checking availability under a row lock on the vehicle inside the same
transaction as the insert.
"""
