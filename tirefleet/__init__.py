"""Tire stock, audit log and vehicle fleet registry service."""

__version__ = "1.0.0"
