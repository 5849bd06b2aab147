"""Shared client-side code for the hotel web frontend: models, services, endpoints."""
