"""Mnexium: Python client and demo chat server for the Mnexium memory API."""

from mnexium.client import MnexiumClient
from mnexium.models import MnxOptions

__version__ = "0.1.0"

__all__ = ["MnexiumClient", "MnxOptions", "__version__"]
