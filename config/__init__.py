"""Top-level package for application configuration.

Holds the environment-driven settings and the composition root that
wires the message bus, the location store and reservation sessions
together for whatever builds the UI tree.
"""
