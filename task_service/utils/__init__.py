"""Helpers for Task Service."""
