"""KIIT Rentals: campus marketplace API and client."""

__version__ = "1.0.0"
