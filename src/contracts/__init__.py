"""Shared protocol constants for the UI websocket."""
