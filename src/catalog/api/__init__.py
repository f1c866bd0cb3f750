"""Catalog domain API package."""
