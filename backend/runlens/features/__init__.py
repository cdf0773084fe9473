"""
Feature modules for RunLens.

Each feature is a self-contained module with:
- models.py / schemas.py - Types and Pydantic schemas
- business logic module(s) (classifier.py, client.py)
"""
