"""Health-check payload used by the API."""

from wealthplan import __version__
from wealthplan.schemas.health import HealthResponse


def get_health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
