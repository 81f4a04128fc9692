"""
Shared Kernel

Base domain classes, value objects and the message bus shared by the
locations and bookings packages.
"""
