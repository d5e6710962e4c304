"""Domain models for the student dashboard view models.

Every entity here is the normalized form of something an agent produced.
Producer-specific synonym fields are resolved before construction, so these
models only carry canonical names. Models are frozen: a view model is
replaced wholesale on every successful sync, never mutated.
"""
from enum import Enum
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field

# Numeric fields are trusted from the agent and may arrive as text
Scalar = Union[int, float, str]


class UrgencyTier(str, Enum):
    """Severity tiers, highest first."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def color(self) -> str:
        return _TIER_COLORS[self]


_TIER_COLORS = {
    UrgencyTier.CRITICAL: "red",
    UrgencyTier.HIGH: "orange",
    UrgencyTier.MEDIUM: "yellow",
    UrgencyTier.LOW: "blue",
}


class _Entity(BaseModel):
    class Config:
        frozen = True


class TimetableEntry(_Entity):
    """One weekly class slot."""
    day: str = ""
    time: str = ""
    course: str = ""
    room: str = ""


class Assignment(_Entity):
    """Course assignment. Only ``pending`` ones are actionable."""
    course: str = ""
    title: str = ""
    status: str = ""
    deadline: Optional[str] = None
    deadline_display: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


class Exam(_Entity):
    """Exam record; a null grade means it has not happened yet."""
    course: str = ""
    type: str = ""
    date: Optional[str] = None
    date_display: Optional[str] = None
    room: str = ""
    grade: Optional[Scalar] = None

    @property
    def is_upcoming(self) -> bool:
        return self.grade is None


class AttendanceRecord(_Entity):
    """Attendance for one course.

    Values are shown exactly as the agent reported them: ``attended <= total``
    and ``percentage == attended / total * 100`` are not checked here.
    """
    attended: Optional[Scalar] = None
    total: Optional[Scalar] = None
    percentage: Optional[Scalar] = None
    is_low: bool = False


class PriorityTask(_Entity):
    task: str = ""
    urgency: str = "MEDIUM"
    tier: UrgencyTier = UrgencyTier.MEDIUM
    rank: Optional[Scalar] = None
    deadline: Optional[str] = None
    deadline_display: Optional[str] = None
    alert: Optional[str] = None
    time_allocated: Optional[str] = None
    preparation_status: Optional[str] = None


class StudyGroup(_Entity):
    """Study group resolved to one shape regardless of producing agent."""
    group_id: str = ""
    topic: Optional[str] = None
    meeting_time: Optional[str] = None
    meeting_display: str = "TBD"
    capacity: Optional[Scalar] = None
    capacity_display: Optional[str] = None
    members: Optional[Scalar] = None
    location: Optional[str] = None


class CourseStudyGroups(_Entity):
    course: str = ""
    groups: List[StudyGroup] = Field(default_factory=list)


class CalendarEvent(_Entity):
    """Shared calendar event with one of three time representations."""
    event: str = ""
    date: Optional[str] = None
    date_time: Optional[str] = None
    time: Optional[str] = None
    when: Optional[str] = None
    location: Optional[str] = None


class UrgentItem(_Entity):
    item: str = ""
    urgency: str = ""
    tier: UrgencyTier = UrgencyTier.LOW
    due: Optional[str] = None
    due_display: Optional[str] = None
    percentage: Optional[Scalar] = None


class PeerUpdate(_Entity):
    course: Optional[str] = None
    recent_activity: Optional[str] = None


class Benchmarks(_Entity):
    """Score comparison against peers; scale is whatever the agent uses."""
    your_score_avg: Optional[Scalar] = None
    peer_group_avg: Optional[Scalar] = None
    percentile: Optional[Scalar] = None
    notes: str = ""


class Session(_Entity):
    time: str = ""
    activity: str = ""
    technique: str = ""


class DailyPlan(_Entity):
    day: str = ""
    focus: str = ""
    sessions: List[Session] = Field(default_factory=list)


class WeeklyPlan(_Entity):
    week_focus: str = ""
    total_study_hours: Optional[Scalar] = None
    breakdown: Dict[str, str] = Field(default_factory=dict)


class AttendanceAlert(_Entity):
    status: str = ""
    message: str = ""
    recommended_actions: List[str] = Field(default_factory=list)


class StudyTechnique(_Entity):
    technique: str = ""
    application: str = ""
    benefit: str = ""


class EstimatedHours(_Entity):
    total_study_hours: Optional[Scalar] = None
    exam_preparation: Optional[Scalar] = None
    assignment_work: Optional[Scalar] = None
    review_and_buffer: Optional[Scalar] = None
    daily_average: Optional[Scalar] = None


class CoordinatorView(_Entity):
    """Everything the academic coordinator agent returned for one sync."""
    timetable: List[TimetableEntry] = Field(default_factory=list)
    assignments: List[Assignment] = Field(default_factory=list)
    exams: List[Exam] = Field(default_factory=list)
    attendance: Dict[str, AttendanceRecord] = Field(default_factory=dict)
    last_sync: Optional[str] = None
    weekly_plan: Optional[WeeklyPlan] = None
    priority_tasks: List[PriorityTask] = Field(default_factory=list)
    attendance_alert: Optional[AttendanceAlert] = None
    peer_updates: List[PeerUpdate] = Field(default_factory=list)
    study_groups: List[CourseStudyGroups] = Field(default_factory=list)
    shared_calendar: List[CalendarEvent] = Field(default_factory=list)
    collaboration_score: Optional[Scalar] = None
    collaboration_recommendations: List[str] = Field(default_factory=list)
    urgent_items: List[UrgentItem] = Field(default_factory=list)
    overall_recommendations: str = ""
    sync_timestamp: Optional[str] = None

    def todays_classes(self, day_name: str) -> List[TimetableEntry]:
        """Timetable entries whose day equals ``day_name`` exactly."""
        return [entry for entry in self.timetable if entry.day == day_name]

    def pending_assignments(self) -> List[Assignment]:
        return [a for a in self.assignments if a.is_pending]

    def upcoming_exams(self) -> List[Exam]:
        return [e for e in self.exams if e.is_upcoming]


class StudyPlanView(_Entity):
    daily_plan: List[DailyPlan] = Field(default_factory=list)
    weekly_plan: Dict[str, str] = Field(default_factory=dict)
    priority_tasks: List[PriorityTask] = Field(default_factory=list)
    study_techniques: List[StudyTechnique] = Field(default_factory=list)
    estimated_hours: Optional[EstimatedHours] = None
    recommendations: str = ""


class CollaborationView(_Entity):
    peer_updates: List[PeerUpdate] = Field(default_factory=list)
    study_groups: List[StudyGroup] = Field(default_factory=list)
    shared_calendar: List[CalendarEvent] = Field(default_factory=list)
    benchmarks: Optional[Benchmarks] = None
    recommendations: List[str] = Field(default_factory=list)
    collaboration_score: Optional[Scalar] = None


class DashboardSnapshot(BaseModel):
    """Point-in-time copy of the dashboard store slots."""
    coordinator: Optional[CoordinatorView] = None
    study_plan: Optional[StudyPlanView] = None
    collaboration: Optional[CollaborationView] = None
    error: Optional[str] = None
    loading: bool = False


class CoordinatorPanel(BaseModel):
    """Coordinator view plus the selections recomputed on every read."""
    view: CoordinatorView
    todays_classes: List[TimetableEntry] = Field(default_factory=list)
    pending_assignments: List[Assignment] = Field(default_factory=list)
    upcoming_exams: List[Exam] = Field(default_factory=list)
    today: str = ""


class DashboardState(BaseModel):
    """What presentation renders: three nullable panels and one error slot."""
    coordinator: Optional[CoordinatorPanel] = None
    study_plan: Optional[StudyPlanView] = None
    collaboration: Optional[CollaborationView] = None
    error: Optional[str] = None
    loading: bool = False
