"""Shared helpers for tera-mod-manager."""
