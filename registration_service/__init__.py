"""User registration service: signup validation, password hashing and storage."""

__version__ = "1.0.0"
