"""secretscout: find secrets committed to git history and directory trees."""

__version__ = "0.4.0"
