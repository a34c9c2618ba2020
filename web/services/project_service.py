"""Project management service."""
import copy
from datetime import datetime, UTC
from typing import Dict, List, Optional
import uuid

from web.extensions import db
from web.models import Project

from coatpath.project_loader import PROJECT_FILE_VERSION


class ProjectService:
    """Service for managing projects."""

    @staticmethod
    def get_all() -> List[Project]:
        """Get all projects, ordered by modified_at descending."""
        return Project.query.order_by(Project.modified_at.desc()).all()

    @staticmethod
    def get(project_id: str) -> Optional[Project]:
        """Get a single project by UUID."""
        return db.session.get(Project, project_id)

    @staticmethod
    def to_dict(project: Project) -> Dict:
        work_area = None
        if project.work_area_width is not None and project.work_area_height is not None:
            work_area = {'width': project.work_area_width, 'height': project.work_area_height}
        return {
            'id': project.id,
            'name': project.name,
            'version': project.version,
            'shapes': project.shapes or [],
            'coatingSettings': project.coating_settings,
            'workArea': work_area,
            'created_at': project.created_at.isoformat() if project.created_at else None,
            'modified_at': project.modified_at.isoformat() if project.modified_at else None
        }

    @staticmethod
    def get_as_dict(project_id: str) -> Optional[Dict]:
        """Get a project as dict for JSON serialization."""
        project = ProjectService.get(project_id)
        if not project:
            return None
        return ProjectService.to_dict(project)

    @staticmethod
    def create(data: Dict) -> Project:
        """Create a new project, optionally with shapes from an exported project file."""
        work_area = data.get('workArea') or {}
        project = Project(
            id=str(uuid.uuid4()),
            name=data.get('name') or 'Untitled Project',
            version=data.get('version') or PROJECT_FILE_VERSION,
            shapes=data.get('shapes') or [],
            coating_settings=data.get('coatingSettings'),
            work_area_width=work_area.get('width'),
            work_area_height=work_area.get('height')
        )
        db.session.add(project)
        db.session.commit()
        return project

    @staticmethod
    def save(project_id: str, data: Dict) -> Optional[Project]:
        """Update a project from editor data."""
        project = db.session.get(Project, project_id)
        if not project:
            return None

        if 'name' in data:
            project.name = data['name']
        if 'shapes' in data:
            project.shapes = data['shapes']
        if 'coatingSettings' in data:
            project.coating_settings = data['coatingSettings']
        if 'workArea' in data:
            work_area = data['workArea'] or {}
            project.work_area_width = work_area.get('width')
            project.work_area_height = work_area.get('height')

        project.modified_at = datetime.now(UTC)
        db.session.commit()
        return project

    @staticmethod
    def delete(project_id: str) -> bool:
        """Delete a project."""
        project = db.session.get(Project, project_id)
        if not project:
            return False

        db.session.delete(project)
        db.session.commit()
        return True

    @staticmethod
    def duplicate(project_id: str, new_name: Optional[str] = None) -> Optional[Project]:
        """Deep copy a project with a new UUID."""
        source = db.session.get(Project, project_id)
        if not source:
            return None

        project = Project(
            id=str(uuid.uuid4()),
            name=new_name if new_name else f"{source.name} (Copy)",
            version=source.version,
            shapes=copy.deepcopy(source.shapes) if source.shapes else [],
            coating_settings=copy.deepcopy(source.coating_settings),
            work_area_width=source.work_area_width,
            work_area_height=source.work_area_height
        )
        db.session.add(project)
        db.session.commit()
        return project
