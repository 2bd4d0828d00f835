"""
Application layer.

Orchestrates core pipeline components into use cases served by the API.
"""
