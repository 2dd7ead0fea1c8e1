"""Grammar practice web application for students and teachers."""

__version__ = "0.1.0"
