"""
Application layer - service wiring.

Builds the service graph from settings; front ends hold the returned
container instead of importing infrastructure directly.
"""

from quotewire.application.services import ServiceContainer, build_services, create_store

__all__ = ["ServiceContainer", "build_services", "create_store"]
