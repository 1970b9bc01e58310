"""Backend (schedule and journey query) API adapter."""

from journey_tracker.adapters.backend_api.backend_repository import BackendJourneyRepository
from journey_tracker.adapters.backend_api.http_client import BackendApiError, BackendHttpClient

__all__ = ["BackendApiError", "BackendHttpClient", "BackendJourneyRepository"]
