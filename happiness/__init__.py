"""Happiness Assistant API package."""
