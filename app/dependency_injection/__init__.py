"""Dependency injection container setup for the backend."""

from app.dependency_injection.container import build_container, get_container

__all__ = ["build_container", "get_container"]
