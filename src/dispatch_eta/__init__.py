"""Delivery route and ETA estimation service."""
