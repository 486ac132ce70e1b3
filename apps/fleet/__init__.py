"""Fleet app package.

Holds the vehicle catalogue. The booking engine only reads a vehicle's
daily rate and flips its availability flag as bookings move through their
lifecycle.
"""
