"""
hotel-api Package

Generic resource API and SQLite datastore for the hotel management app,
built with FastAPI, SQLAlchemy and pydantic.
"""

__version__ = "1.0.0"

__all__ = [
    "api",
    "core",
    "models",
    "services",
    "stores",
]
