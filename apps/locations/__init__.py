"""Locations app package.

This app holds the catalog of rentable storage spots and their reviews:
the immutable Location/Review snapshots, the derived rating, the
in-memory store every screen reads from, and the helpers that turn
fetched API records into snapshots.
"""
