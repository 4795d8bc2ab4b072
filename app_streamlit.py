"""Streamlit UI for the Student Performance Dashboard.

Renders the views served by the FastAPI backend; all filtering, sorting and
aggregation happens server-side in the dashboard session.
"""
import streamlit as st
import requests
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt

from app.core.config import settings
from app.domain.columns import TABLE_COLUMNS

# ---------------------------
# CONFIG
# ---------------------------
st.set_page_config(page_title="Student Performance Dashboard", page_icon="📊", layout="wide")

API_BASE = settings.api_base.rstrip("/") + settings.api_prefix
st.title("📊 Student Performance Dashboard")

INSIGHTS = [
    "High Performers generally show higher comprehension and attention.",
    "Attention and assessment scores have a visible positive correlation.",
    "Struggling Learners show lower focus and retention on average.",
]


# ---------------------------
# HELPER FUNCTIONS
# ---------------------------
def api_call(method: str, path: str, payload=None) -> dict:
    """Call the backend and return the decoded dashboard view."""
    res = requests.request(method, f"{API_BASE}{path}", json=payload, timeout=15)
    res.raise_for_status()
    return res.json()


def start_session() -> None:
    data = api_call("POST", "/sessions")
    st.session_state["session_id"] = data["session_id"]
    st.session_state["view"] = data["view"]


def update_view(method: str, path: str, payload=None) -> None:
    session_id = st.session_state["session_id"]
    try:
        st.session_state["view"] = api_call(method, f"/sessions/{session_id}{path}", payload)
    except requests.HTTPError as e:
        if e.response is not None and e.response.status_code == 404:
            # backend restarted; sessions are not persisted
            start_session()
        else:
            raise


def render_radar(points: list) -> None:
    labels = [p["skill"] for p in points]
    values = [p["value"] for p in points]
    angles = np.linspace(0, 2 * np.pi, len(labels), endpoint=False).tolist()
    values += values[:1]
    angles += angles[:1]

    fig, ax = plt.subplots(figsize=(5, 5), subplot_kw={"polar": True})
    ax.plot(angles, values, color="#6366f1")
    ax.fill(angles, values, color="#6366f1", alpha=0.6)
    ax.set_xticks(angles[:-1])
    ax.set_xticklabels(labels)
    st.pyplot(fig)
    plt.close(fig)


# ---------------------------
# SESSION
# ---------------------------
if "session_id" not in st.session_state:
    try:
        start_session()
    except requests.RequestException as e:
        st.error(f"⚠️ Error contacting backend: {e}")
        st.stop()

view = st.session_state["view"]
state = view["state"]
students = view["students"]

# ---------------------------
# STUDENT SELECTION
# ---------------------------
options = [""] + [s["student_id"] for s in students]
names = {s["student_id"]: s["name"] for s in students}
selected = st.selectbox(
    "Select here for a single student's performance",
    options,
    index=options.index(state["selected_id"]) if state["selected_id"] in options else 0,
    format_func=lambda sid: "Show All Students" if not sid else f"{sid} - {names[sid]}",
)
if selected != state["selected_id"]:
    update_view("PUT", "/selection", {"student_id": selected})
    st.rerun()

# ---------------------------
# OVERVIEW STATS
# ---------------------------
if view["aggregate"]:
    cols = st.columns(len(view["aggregate"]))
    for col, (metric, value) in zip(cols, view["aggregate"].items()):
        col.metric(metric.upper(), value)

# ---------------------------
# CHARTS
# ---------------------------
st.subheader("📈 Skill vs Score")
if view["skill_vs_score"]:
    skill_df = pd.DataFrame(view["skill_vs_score"]).set_index("name")
    st.bar_chart(skill_df)

st.subheader("📌 Attention vs Performance")
if view["attention_vs_performance"]:
    scatter_df = pd.DataFrame(view["attention_vs_performance"]).rename(
        columns={"x": "Attention", "y": "Assessment Score"}
    )
    st.scatter_chart(scatter_df, x="Attention", y="Assessment Score")

st.subheader("🧠 Student Profile (Radar)")
if view["radar_profile"]:
    render_radar(view["radar_profile"])
else:
    st.caption("Select a single student to view radar profile")

# ---------------------------
# STUDENT TABLE
# ---------------------------
st.subheader("📋 Students")
search = st.text_input("Search by name or persona...", value=state["search_text"])
if search != state["search_text"]:
    update_view("PUT", "/search", {"text": search})
    st.rerun()

header = st.columns(len(TABLE_COLUMNS))
for col, name in zip(header, TABLE_COLUMNS):
    arrow = ""
    if state["sort_field"] == name:
        arrow = " ▲" if state["sort_order"] == "asc" else " ▼"
    if col.button(f"{name}{arrow}", key=f"sort_{name}"):
        update_view("POST", "/sort", {"field": name})
        st.rerun()

table = pd.DataFrame(view["sorted_rows"], columns=list(TABLE_COLUMNS))
st.dataframe(table, hide_index=True, use_container_width=True)

# ---------------------------
# INSIGHTS
# ---------------------------
st.subheader("💡 Insights")
st.markdown("\n".join(f"- {line}" for line in INSIGHTS))
