"""
Core domain models, mathematical primitives, and formatting helpers.

This module contains the building blocks that are independent of external
systems (exchanges, messaging, rendering).
"""
