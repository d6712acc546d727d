"""Anime search REST API package.

Sub-modules expose FastAPI routers for each domain:
- search: fuzzy keyword search, suggestions and hot keywords
"""
