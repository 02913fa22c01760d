"""
Configuration management for the shop API.

Contains Pydantic settings that work across the local-dev and cloud
deployment modes.
"""
