"""Bookings app package.

This app encapsulates the reservation flow on the client: the day-tap
state machine that builds a booking window, the per-screen reservation
session with its hourly/daily mode, and price resolution for a chosen
window.
"""
