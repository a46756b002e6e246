"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, database), ``schemas``
(validation and record models), ``services`` (queries) and ``api``
(versioned routers).
"""

from .main import app  # noqa: F401
