from app.models.user import User
from app.models.project import Project
from app.models.task import Task, TaskStatus

__all__ = ["User", "Project", "Task", "TaskStatus"]
