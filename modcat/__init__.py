"""modcat — module catalog scanner for the InfoTech.io platform."""

__version__ = "2.0.0"
