"""Test doubles for the Mnexium API."""

from tests.fakes.service import FakeMemoryService

__all__ = ["FakeMemoryService"]
