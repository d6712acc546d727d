"""Anime site search backend."""
