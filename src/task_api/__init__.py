"""
FastAPI Task Management API package.

The ASGI application lives in ``task_api.main:app``; the domain rules are in
``task_api.service`` and the stores in ``task_api.repositories`` / ``task_api.db``.
"""
