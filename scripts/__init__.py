"""Maintenance scripts for the song catalogs."""
