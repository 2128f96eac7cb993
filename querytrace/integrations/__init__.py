"""Tracer integrations."""
