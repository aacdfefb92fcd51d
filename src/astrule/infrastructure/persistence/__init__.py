"""Persistence layer for the SQL rule store."""
