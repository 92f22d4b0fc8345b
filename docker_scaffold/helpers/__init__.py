"""Helper utilities for console output and configuration."""
