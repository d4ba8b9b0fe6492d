"""Core domain layer - entities, services, interfaces, and exceptions."""

from billdesk.core import entities, exceptions, interfaces, pricing, services

__all__ = ["entities", "services", "interfaces", "exceptions", "pricing"]
