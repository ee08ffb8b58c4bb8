from .user import Student, Supervisor, Admin
from .task import Task, TaskSubmission, TaskStatusUpdate, TaskStatus, SubmissionStatus
from .project import Project, ProjectStatusUpdate, ProjectStatus
from .schedule import Schedule
from .notification import Notification, NotificationType, RecipientKind
from .token import RefreshToken
