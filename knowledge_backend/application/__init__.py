"""
Application layer.

Services orchestrating core logic for the HTTP API.
"""
