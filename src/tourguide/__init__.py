"""TourGuide: location tracking, proximity rewards and nearby-attraction recommendations."""

__version__ = "0.1.0"
