"""Mappings from profile answers to event categories and places."""
