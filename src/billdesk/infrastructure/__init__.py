"""Infrastructure layer - backend gateways and session storage."""
