"""PhotoShare: photo sharing API with per-photo visibility."""

__version__ = "0.4.0"
