"""Streamlit UI for the Smart College Life Manager dashboard."""

import pandas as pd
import requests
import streamlit as st

from app.core.config import settings

# ---------------------------
# CONFIG
# ---------------------------
st.set_page_config(page_title="Smart College Life Manager", page_icon="📚", layout="wide")

API_BASE = settings.api_base  # FastAPI backend
TIER_BADGES = {"CRITICAL": "🔴", "HIGH": "🟠", "MEDIUM": "🟡", "LOW": "🔵"}

st.title("📚 Smart College Life Manager")


# ---------------------------
# HELPER FUNCTIONS
# ---------------------------
def call_api(method: str, path: str, payload: dict | None = None, timeout: int = 150) -> dict | None:
    """Call the backend and return the dashboard state, or None on failure."""
    try:
        res = requests.request(method, f"{API_BASE}{path}", json=payload, timeout=timeout)
        if res.ok:
            return res.json()
        st.error(f"Backend error ({res.status_code}): {res.json().get('error', 'Unknown error')}")
    except (requests.RequestException, ValueError) as e:
        st.error(f"⚠️ Error contacting backend: {e}")
    return None


def badge(tier: str) -> str:
    return TIER_BADGES.get(tier, TIER_BADGES["LOW"])


def render_coordinator(panel: dict):
    view = panel["view"]

    if view["urgent_items"]:
        st.subheader("🚨 Urgent")
        for item in view["urgent_items"]:
            line = f"{badge(item['tier'])} **{item['item']}**"
            if item.get("due_display"):
                line += f" · due {item['due_display']}"
            if item.get("percentage") is not None:
                line += f" · {item['percentage']}%"
            st.markdown(line)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader(f"🕘 Today ({panel['today']})")
        if panel["todays_classes"]:
            for entry in panel["todays_classes"]:
                st.markdown(f"**{entry['course']}** · {entry['time']} · Room {entry['room']}")
        else:
            st.caption("No classes today")

        st.subheader("📝 Pending assignments")
        if panel["pending_assignments"]:
            for a in panel["pending_assignments"]:
                st.markdown(f"**{a['title']}** ({a['course']}) · Due: {a.get('deadline_display') or 'n/a'}")
        else:
            st.caption("All caught up")

    with col2:
        st.subheader("🎯 Upcoming exams")
        if panel["upcoming_exams"]:
            for e in panel["upcoming_exams"]:
                st.markdown(f"**{e['course']}** {e['type']} · {e.get('date_display') or 'TBD'} · {e['room']}")
        else:
            st.caption("No upcoming exams")

        st.subheader("📊 Attendance")
        if view["attendance"]:
            df = pd.DataFrame([
                {"course": course, **record} for course, record in view["attendance"].items()
            ])
            st.dataframe(df, hide_index=True)

    if view.get("weekly_plan"):
        plan = view["weekly_plan"]
        st.info(f"Week focus: {plan['week_focus']} · {plan['total_study_hours']}h planned "
                f"· {len(view['priority_tasks'])} priority tasks")
    if view.get("overall_recommendations"):
        st.markdown(view["overall_recommendations"])


def render_study_plan(plan: dict):
    if plan["priority_tasks"]:
        st.subheader("Priority tasks")
        for task in plan["priority_tasks"]:
            line = f"{badge(task['tier'])} **{task['task']}** ({task['urgency']})"
            if task.get("deadline_display"):
                line += f" · {task['deadline_display']}"
            if task.get("time_allocated"):
                line += f" · {task['time_allocated']}"
            st.markdown(line)

    for day in plan["daily_plan"]:
        with st.expander(f"{day['day']}: {day['focus']}"):
            for session in day["sessions"]:
                st.markdown(f"`{session['time']}` {session['activity']} · _{session['technique']}_")

    if plan["study_techniques"]:
        st.subheader("Techniques")
        st.dataframe(pd.DataFrame(plan["study_techniques"]), hide_index=True)
    if plan.get("recommendations"):
        st.markdown(plan["recommendations"])


def render_study_group(group: dict):
    st.markdown(f"**{group.get('topic') or group['group_id']}** · {group['meeting_display']}")
    members = group.get("members")
    details = [
        str(v) for v in (
            f"{members} members" if members is not None else None,
            group.get("location"),
            group.get("capacity_display"),
        ) if v is not None
    ]
    if details:
        st.caption(" · ".join(details))


def render_collaboration(state: dict):
    collab = state.get("collaboration")
    coordinator = state.get("coordinator")

    events = coordinator["view"]["shared_calendar"] if coordinator else []
    st.subheader("📅 Class events")
    if events:
        for event in events:
            where = f" · {event['location']}" if event.get("location") else ""
            st.markdown(f"**{event['event']}** · {event.get('when') or 'TBD'}{where}")
    else:
        st.caption("No upcoming events. Sync to load them.")

    st.subheader("👥 Study groups")
    if coordinator:
        for course_groups in coordinator["view"]["study_groups"]:
            st.markdown(f"_{course_groups['course']}_")
            for group in course_groups["groups"]:
                render_study_group(group)
    if collab:
        for group in collab["study_groups"]:
            render_study_group(group)

    if collab and collab.get("benchmarks"):
        b = collab["benchmarks"]
        st.subheader("🏆 Benchmarks")
        c1, c2, c3 = st.columns(3)
        c1.metric("Your average", b["your_score_avg"])
        c2.metric("Peer average", b["peer_group_avg"])
        c3.metric("Percentile", b["percentile"])
        st.caption(b["notes"])
        for rec in collab["recommendations"]:
            st.markdown(f"- {rec}")


# ---------------------------
# MAIN
# ---------------------------
if "dashboard" not in st.session_state:
    st.session_state["dashboard"] = call_api("GET", "/dashboard", timeout=10) or {}

if st.button("🔄 Sync & Plan"):
    with st.spinner("Syncing..."):
        st.session_state["dashboard"] = call_api("POST", "/dashboard/sync") or st.session_state["dashboard"]

state = st.session_state["dashboard"]
if state.get("error"):
    st.error(state["error"])

tab_dash, tab_plan, tab_collab = st.tabs(["Dashboard", "Study Plan", "Collaboration"])

with tab_dash:
    if state.get("coordinator"):
        render_coordinator(state["coordinator"])
    else:
        st.caption("Press Sync & Plan to load your academic data.")

with tab_plan:
    custom = st.text_area(
        "What should the plan cover?",
        placeholder="e.g., I have exams in Data Structures (Monday) and DBMS (Thursday)",
    )
    if st.button("Generate Study Plan"):
        with st.spinner("Generating plan..."):
            result = call_api("POST", "/dashboard/study-plan", {"message": custom or None})
            st.session_state["dashboard"] = result or st.session_state["dashboard"]
            state = st.session_state["dashboard"]
    if state.get("study_plan"):
        render_study_plan(state["study_plan"])

with tab_collab:
    if st.button("Load Collaboration"):
        with st.spinner("Loading..."):
            result = call_api("POST", "/dashboard/collaboration")
            st.session_state["dashboard"] = result or st.session_state["dashboard"]
            state = st.session_state["dashboard"]
    render_collaboration(state)
