"""
api
===

FastAPI application exposing the Chronograph versioning operations.
"""
