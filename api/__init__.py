"""
FastAPI RESTful API for the Book Catalog service.

This module provides a REST API for:
- Creating, listing, updating and deleting books stored in MongoDB
- Looking up the current weather for a city
"""
