"""
FastAPI RESTful API for books and news.

This module provides:
- Book CRUD backed by MongoDB
- A pass-through search over the NewsAPI top headlines
- OpenAPI documentation served at /api-docs
"""
