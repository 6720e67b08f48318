"""Editing session facade, group transforms, project files and command export."""
from .group_ops import GroupManager
from .mcfunction import export_mcfunction
from .project import Project
from .project_io import ProjectFormatError, ProjectSnapshot

__all__ = [
    "Project",
    "GroupManager",
    "ProjectSnapshot",
    "ProjectFormatError",
    "export_mcfunction",
]
