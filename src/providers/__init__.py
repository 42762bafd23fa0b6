"""Beatmap catalog implementations."""
