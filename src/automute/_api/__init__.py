"""Endpoint helpers for the inventory and configuration services."""
