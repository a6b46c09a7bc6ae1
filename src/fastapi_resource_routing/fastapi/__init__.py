"""FastAPI adapter for resource routing."""

from fastapi_resource_routing.fastapi.router import FastAPIRouteSink, create_resource_router

__all__ = ["FastAPIRouteSink", "create_resource_router"]
