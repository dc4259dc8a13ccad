"""Offline audit of the fleet engine output."""
