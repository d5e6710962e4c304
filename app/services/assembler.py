"""View model assembly from agent results.

Turns the loosely typed ``result`` payload of each agent into one of the three
dashboard view models. Every ``assemble_*`` function is a pure transform that
either returns a view model or raises ``MalformedAgentResponse``. Missing
collections become empty collections; missing optional fields never drop an
entry.
"""
from datetime import datetime
from typing import Any, Mapping, Optional

from app.core.config import settings
from app.domain.dashboard import (
    Assignment,
    AttendanceAlert,
    AttendanceRecord,
    Benchmarks,
    CalendarEvent,
    CollaborationView,
    CoordinatorPanel,
    CoordinatorView,
    CourseStudyGroups,
    DailyPlan,
    DashboardSnapshot,
    DashboardState,
    EstimatedHours,
    Exam,
    PeerUpdate,
    PriorityTask,
    Session,
    StudyGroup,
    StudyPlanView,
    StudyTechnique,
    TimetableEntry,
    UrgentItem,
    WeeklyPlan,
)
from app.services.normalization import (
    CAPACITY_FIELDS,
    DEFAULT_URGENCY,
    EVENT_TIME_FIELDS,
    MEETING_FIELDS,
    TOPIC_FIELDS,
    URGENCY_FIELDS,
    as_mapping,
    as_optional_text,
    as_records,
    as_scalar,
    as_text,
    as_text_list,
    as_text_map,
    classify_urgency,
    coalesce,
    unwrap_result,
)
from app.utils.dates import format_date

COORDINATOR_KEYS = ("lms_data", "study_plan", "collaboration", "urgent_items")
STUDY_PLAN_KEYS = ("daily_plan", "weekly_plan", "priority_tasks", "study_techniques", "estimated_hours")
COLLABORATION_KEYS = ("study_groups", "benchmarks", "peer_updates", "shared_calendar", "collaboration_score")


# -----------------
# ENTITIES
# -----------------

def _display(value: Optional[str]) -> Optional[str]:
    return None if value is None else format_date(value)


def _capacity_display(capacity: Any) -> Optional[str]:
    """Seat counts read as "N seats"; availability text is shown as given."""
    if capacity is None:
        return None
    if isinstance(capacity, (int, float)) and not isinstance(capacity, bool):
        return f"{capacity} seats"
    return str(capacity)


def build_timetable_entry(record: Mapping[str, Any]) -> TimetableEntry:
    return TimetableEntry(
        day=as_text(record.get("day")),
        time=as_text(record.get("time")),
        course=as_text(record.get("course")),
        room=as_text(record.get("room")),
    )


def build_assignment(record: Mapping[str, Any]) -> Assignment:
    deadline = as_optional_text(record.get("deadline"))
    return Assignment(
        course=as_text(record.get("course")),
        title=as_text(record.get("title")),
        status=as_text(record.get("status")),
        deadline=deadline,
        deadline_display=_display(deadline),
    )


def build_exam(record: Mapping[str, Any]) -> Exam:
    date = as_optional_text(record.get("date"))
    return Exam(
        course=as_text(record.get("course")),
        type=as_text(record.get("type")),
        date=date,
        date_display=_display(date),
        room=as_text(record.get("room")),
        grade=as_scalar(record.get("grade")),
    )


def build_attendance(value: Any) -> dict:
    """Attendance map keyed by course; numbers are passed through unchecked."""
    threshold = settings.attendance_warning_threshold
    attendance = {}
    for course, data in as_mapping(value).items():
        data = as_mapping(data)
        percentage = as_scalar(data.get("percentage"))
        is_low = (
            isinstance(percentage, (int, float))
            and not isinstance(percentage, bool)
            and percentage < threshold
        )
        attendance[as_text(course)] = AttendanceRecord(
            attended=as_scalar(data.get("attended")),
            total=as_scalar(data.get("total")),
            percentage=percentage,
            is_low=is_low,
        )
    return attendance


def build_priority_task(record: Mapping[str, Any]) -> PriorityTask:
    """Resolve a priority task from either producer's shape.

    ``priority`` doubles as the rank when it is a number and no ``rank`` is
    given; otherwise it is an urgency synonym.
    """
    rank = record.get("rank")
    fields = URGENCY_FIELDS
    priority = record.get("priority")
    if isinstance(priority, (int, float)) and not isinstance(priority, bool):
        if rank is None:
            rank = priority
        fields = tuple(name for name in URGENCY_FIELDS if name != "priority")

    urgency = as_text(coalesce(record, fields), DEFAULT_URGENCY) or DEFAULT_URGENCY
    deadline = as_optional_text(record.get("deadline"))
    return PriorityTask(
        task=as_text(record.get("task")),
        urgency=urgency,
        tier=classify_urgency(urgency),
        rank=as_scalar(rank),
        deadline=deadline,
        deadline_display=_display(deadline),
        alert=as_optional_text(record.get("alert")),
        time_allocated=as_optional_text(record.get("time_allocated")),
        preparation_status=as_optional_text(record.get("preparation_status")),
    )


def build_study_group(record: Mapping[str, Any]) -> StudyGroup:
    meeting_time = as_optional_text(coalesce(record, MEETING_FIELDS))
    capacity = as_scalar(coalesce(record, CAPACITY_FIELDS))
    return StudyGroup(
        group_id=as_text(record.get("group_id")),
        topic=as_optional_text(coalesce(record, TOPIC_FIELDS)),
        meeting_time=meeting_time,
        meeting_display=format_date(meeting_time) if meeting_time is not None else "TBD",
        capacity=capacity,
        capacity_display=_capacity_display(capacity),
        members=as_scalar(record.get("members")),
        location=as_optional_text(record.get("location")),
    )


def build_course_study_groups(record: Mapping[str, Any]) -> CourseStudyGroups:
    return CourseStudyGroups(
        course=as_text(record.get("course")),
        groups=[build_study_group(g) for g in as_records(record.get("groups"), "study_groups.groups")],
    )


def build_calendar_event(record: Mapping[str, Any]) -> CalendarEvent:
    """``when`` is the formatted date or date_time, else the raw time."""
    dated = as_optional_text(coalesce(record, EVENT_TIME_FIELDS))
    time = as_optional_text(record.get("time"))
    return CalendarEvent(
        event=as_text(record.get("event")),
        date=as_optional_text(record.get("date")),
        date_time=as_optional_text(record.get("date_time")),
        time=time,
        when=format_date(dated) if dated is not None else time,
        location=as_optional_text(record.get("location")),
    )


def build_urgent_item(record: Mapping[str, Any]) -> UrgentItem:
    urgency = as_text(record.get("urgency"))
    due = as_optional_text(record.get("due"))
    return UrgentItem(
        item=as_text(record.get("item")),
        urgency=urgency,
        tier=classify_urgency(urgency),
        due=due,
        due_display=_display(due),
        percentage=as_scalar(record.get("percentage")),
    )


def build_peer_update(record: Mapping[str, Any]) -> PeerUpdate:
    return PeerUpdate(
        course=as_optional_text(record.get("course")),
        recent_activity=as_optional_text(record.get("recent_activity")),
    )


def build_benchmarks(value: Any) -> Optional[Benchmarks]:
    if not isinstance(value, Mapping):
        return None
    return Benchmarks(
        your_score_avg=as_scalar(value.get("your_score_avg")),
        peer_group_avg=as_scalar(value.get("peer_group_avg")),
        percentile=as_scalar(value.get("percentile")),
        notes=as_text(value.get("notes")),
    )


def build_daily_plan(record: Mapping[str, Any]) -> DailyPlan:
    sessions = [
        Session(
            time=as_text(s.get("time")),
            activity=as_text(s.get("activity")),
            technique=as_text(s.get("technique")),
        )
        for s in as_records(record.get("sessions"), "daily_plan.sessions")
    ]
    return DailyPlan(day=as_text(record.get("day")), focus=as_text(record.get("focus")), sessions=sessions)


# -----------------
# VIEW MODELS
# -----------------

def assemble_coordinator_view(result: Any) -> CoordinatorView:
    """Build the coordinator view from the academic coordinator's result."""
    data = unwrap_result(result, COORDINATOR_KEYS)
    lms = as_mapping(data.get("lms_data"))
    plan = as_mapping(data.get("study_plan"))
    collab = as_mapping(data.get("collaboration"))

    weekly = plan.get("weekly_plan")
    weekly_plan = None
    if isinstance(weekly, Mapping):
        weekly_plan = WeeklyPlan(
            week_focus=as_text(weekly.get("week_focus")),
            total_study_hours=as_scalar(weekly.get("total_study_hours")),
            breakdown=as_text_map(weekly.get("breakdown")),
        )

    alert = plan.get("attendance_alert")
    attendance_alert = None
    if isinstance(alert, Mapping):
        attendance_alert = AttendanceAlert(
            status=as_text(alert.get("status")),
            message=as_text(alert.get("message")),
            recommended_actions=as_text_list(alert.get("recommended_actions")),
        )

    return CoordinatorView(
        timetable=[build_timetable_entry(r) for r in as_records(lms.get("timetable"), "timetable")],
        assignments=[build_assignment(r) for r in as_records(lms.get("assignments"), "assignments")],
        exams=[build_exam(r) for r in as_records(lms.get("exams"), "exams")],
        attendance=build_attendance(lms.get("attendance")),
        last_sync=as_optional_text(lms.get("last_sync")),
        weekly_plan=weekly_plan,
        priority_tasks=[build_priority_task(r) for r in as_records(plan.get("priority_tasks"), "priority_tasks")],
        attendance_alert=attendance_alert,
        peer_updates=[build_peer_update(r) for r in as_records(collab.get("peer_updates"), "peer_updates")],
        study_groups=[
            build_course_study_groups(r) for r in as_records(collab.get("study_groups"), "study_groups")
        ],
        shared_calendar=[
            build_calendar_event(r) for r in as_records(collab.get("shared_calendar"), "shared_calendar")
        ],
        collaboration_score=as_scalar(collab.get("collaboration_score")),
        collaboration_recommendations=as_text_list(collab.get("recommendations")),
        urgent_items=[build_urgent_item(r) for r in as_records(data.get("urgent_items"), "urgent_items")],
        overall_recommendations=as_text(data.get("overall_recommendations")),
        sync_timestamp=as_optional_text(data.get("sync_timestamp")),
    )


def assemble_study_plan_view(result: Any) -> StudyPlanView:
    """Build the study plan view from the study planner's result."""
    data = unwrap_result(result, STUDY_PLAN_KEYS)

    hours = data.get("estimated_hours")
    estimated_hours = None
    if isinstance(hours, Mapping):
        estimated_hours = EstimatedHours(**{
            name: as_scalar(hours.get(name)) for name in EstimatedHours.model_fields
        })

    techniques = [
        StudyTechnique(
            technique=as_text(r.get("technique")),
            application=as_text(r.get("application")),
            benefit=as_text(r.get("benefit")),
        )
        for r in as_records(data.get("study_techniques"), "study_techniques")
    ]

    return StudyPlanView(
        daily_plan=[build_daily_plan(r) for r in as_records(data.get("daily_plan"), "daily_plan")],
        weekly_plan=as_text_map(data.get("weekly_plan")),
        priority_tasks=[build_priority_task(r) for r in as_records(data.get("priority_tasks"), "priority_tasks")],
        study_techniques=techniques,
        estimated_hours=estimated_hours,
        recommendations=as_text(data.get("recommendations")),
    )


def assemble_collaboration_view(result: Any) -> CollaborationView:
    """Build the collaboration view from the collaboration agent's result."""
    data = unwrap_result(result, COLLABORATION_KEYS)
    return CollaborationView(
        peer_updates=[build_peer_update(r) for r in as_records(data.get("peer_updates"), "peer_updates")],
        study_groups=[build_study_group(r) for r in as_records(data.get("study_groups"), "study_groups")],
        shared_calendar=[
            build_calendar_event(r) for r in as_records(data.get("shared_calendar"), "shared_calendar")
        ],
        benchmarks=build_benchmarks(data.get("benchmarks")),
        recommendations=as_text_list(data.get("recommendations")),
        collaboration_score=as_scalar(data.get("collaboration_score")),
    )


# -----------------
# RENDERING
# -----------------

def build_coordinator_panel(view: CoordinatorView, now: Optional[datetime] = None) -> CoordinatorPanel:
    """Attach the read-time selections to a coordinator view.

    Today's classes depend on the current local day, so this runs on every
    read rather than once at sync time.
    """
    today = (now or datetime.now()).strftime("%A")
    return CoordinatorPanel(
        view=view,
        todays_classes=view.todays_classes(today),
        pending_assignments=view.pending_assignments(),
        upcoming_exams=view.upcoming_exams(),
        today=today,
    )


def render_dashboard(snapshot: DashboardSnapshot, now: Optional[datetime] = None) -> DashboardState:
    """Turn a store snapshot into what presentation renders."""
    coordinator = None
    if snapshot.coordinator is not None:
        coordinator = build_coordinator_panel(snapshot.coordinator, now)
    return DashboardState(
        coordinator=coordinator,
        study_plan=snapshot.study_plan,
        collaboration=snapshot.collaboration,
        error=snapshot.error,
        loading=snapshot.loading,
    )
