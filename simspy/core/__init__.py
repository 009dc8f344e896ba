"""Core session and resource-synchronization layer."""
