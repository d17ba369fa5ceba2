"""
fleetdash - Administrative front end for game players and servers.

fleetdash mirrors the player and server lists of a metadata backend, lets a
user edit one resource's labels and annotations at a time, commits the edit
and reconciles the list, and reports outcomes as short-lived notifications.
"""

__version__ = "0.1.0"
__author__ = "fleetdash Contributors"
__license__ = "GPL-2.0"

from fleetdash.dashboard import Dashboard

__all__ = ["Dashboard", "__version__"]
