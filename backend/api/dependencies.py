"""FastAPI dependencies that hand routers the per-process components."""

from fastapi import Request

from backend.services import Services


def get_services(request: Request) -> Services:
    """Return the components built during application startup."""
    return request.app.state.services
