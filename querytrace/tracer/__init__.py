"""Tracer interface."""

from .base import BaseTracer

__all__ = ["BaseTracer"]
