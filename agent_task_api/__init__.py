"""
Top-level package for the Agent Task API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``agent_task_api.app.main:app``.
"""

__all__ = []
