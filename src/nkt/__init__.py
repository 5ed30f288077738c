"""nkt: personal note, journal and task keeper."""

__version__ = "0.3.0"
