from __future__ import annotations

from datetime import timedelta
from typing import List, Tuple

import structlog

from .models import NewTask, TaskStatus
from .repositories import Repository
from .service import Clock, utcnow

logger = structlog.get_logger(__name__)

# (title, description, status, created_ago, updated_ago)
_SAMPLE_TASKS: List[Tuple[str, str, TaskStatus, timedelta, timedelta]] = [
    (
        "Set up development environment",
        "Install necessary tools and configure the development environment for the project",
        TaskStatus.NOT_STARTED,
        timedelta(days=5),
        timedelta(days=5),
    ),
    (
        "Create project documentation",
        "Write comprehensive documentation for the project including API specs and user guides",
        TaskStatus.NOT_STARTED,
        timedelta(days=4),
        timedelta(days=4),
    ),
    (
        "Implement user authentication",
        "Develop login, registration, and password reset functionality",
        TaskStatus.IN_PROGRESS,
        timedelta(days=3),
        timedelta(days=1),
    ),
    (
        "Design database schema",
        "Create and optimize database tables for the application",
        TaskStatus.IN_PROGRESS,
        timedelta(days=2),
        timedelta(hours=6),
    ),
    (
        "Set up CI/CD pipeline",
        "Configure automated testing and deployment processes",
        TaskStatus.COMPLETED,
        timedelta(days=6),
        timedelta(days=1),
    ),
    (
        "Create task management API",
        "Develop REST API endpoints for task CRUD operations",
        TaskStatus.COMPLETED,
        timedelta(days=3),
        timedelta(hours=2),
    ),
]


# PUBLIC_INTERFACE
def seed_if_empty(repository: Repository, clock: Clock = utcnow) -> int:
    """
    Insert the sample tasks when the store holds no records.

    Returns:
        Number of tasks inserted (0 when the store already had data).
    """
    if repository.count() > 0:
        return 0

    now = clock()
    for title, description, status, created_ago, updated_ago in _SAMPLE_TASKS:
        data: NewTask = {
            "title": title,
            "description": description,
            "status": status,
            "created_at": now - created_ago,
            "updated_at": now - updated_ago,
        }
        repository.insert(data)

    logger.info("Database seeded with sample tasks", count=len(_SAMPLE_TASKS))
    return len(_SAMPLE_TASKS)
