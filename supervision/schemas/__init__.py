from .user import StudentCreate, SupervisorCreate, StudentOut, SupervisorOut, StudentWithWork
from .tokens import Token, AccessToken, RefreshTokenRequest, MessageOut
from .task import TaskOut, TaskDetailOut, SubmissionOut, AssignTaskRequest, CreateTaskRequest, TaskUpdate, SubmitTaskRequest, ReviewTaskRequest
from .project import ProjectOut, StudentProjectView, SubmitProjectRequest, WorkOut
from .schedule import ScheduleCreate, ScheduleUpdate, ScheduleOut
from .notification import NotificationOut, UnreadCount
from .dashboard import MonthlyMetric, StudentDashboard, SupervisorDashboard
