"""Utility helpers shared by the web app and services."""
