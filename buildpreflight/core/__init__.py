"""Core domain: configuration, models, services and use cases."""
