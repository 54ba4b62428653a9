"""Attendly - church service attendance backend."""
