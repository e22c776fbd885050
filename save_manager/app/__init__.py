"""Command line interface for save-manager."""
