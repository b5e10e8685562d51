"""Streamlit frontend for the K9 training dashboard."""

from __future__ import annotations

from datetime import date
from typing import Any

import pandas as pd
import streamlit as st

from app.domain.k9 import SampleResult, SessionMode
from app.mappers.entity_reconciler import find_by_id, new_dog, new_trainer
from app.services.metrics_service import DashboardMetrics, MetricsService
from app.services.rapid_entry_service import (
    MODULES,
    RECORD_TYPES,
    REINFORCERS,
    SCHEDULES,
    RapidEntryForm,
    RapidEntryQueue,
    RapidEntryValidationError,
    create_session,
    objectives_for_module,
)
from app.services.roster_service import dog_profile, dog_roster, team_ranking, trainer_profile

st.set_page_config(page_title="K9 Dashboard", page_icon="K9", layout="wide")

MODE_LABELS = {"Entrenamiento": SessionMode.TRAINING, "Muestras": SessionMode.OPERATIONAL}


@st.cache_resource(show_spinner=False)
def _load_backend_handles() -> dict[str, Any]:
    """Build the controller once per server process and start its scheduler."""
    from app.config import get_dashboard_settings  # noqa: PLC0415
    from app.scheduler.jobs import get_scheduler  # noqa: PLC0415
    from app.services.dashboard_controller import get_dashboard_controller  # noqa: PLC0415

    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()

    controller = get_dashboard_controller()
    controller.refresh()
    settings = get_dashboard_settings()
    return {
        "controller": controller,
        "metrics": MetricsService(window_days=settings.window_days, top_n=settings.top_n),
    }


def _metrics_frame(metrics: DashboardMetrics) -> pd.DataFrame:
    return pd.DataFrame(
        [{"date": stat.date, "accuracy": stat.accuracy} for stat in metrics.daily_accuracy]
    ).set_index("date")


def _performance_frame(items: list[Any]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"name": item.name, "accuracy": round(item.accuracy, 1), "sessions": item.session_count}
            for item in items
        ]
    )


def _alert(result: Any) -> None:
    if result.ok:
        st.success(result.message)
    else:
        st.error(result.message)


handles = _load_backend_handles()
controller = handles["controller"]
metrics_service: MetricsService = handles["metrics"]

if "entry_queue" not in st.session_state:
    st.session_state.entry_queue = RapidEntryQueue()

with st.sidebar:
    st.header("Controls")
    mode_label = st.radio("Mode", options=list(MODE_LABELS), horizontal=True)
    mode = MODE_LABELS[mode_label]
    if st.button("Refresh data", use_container_width=True):
        with st.spinner("Loading sheet..."):
            if not controller.refresh():
                st.warning("Could not refresh; showing the last loaded data.")
        st.rerun()
    snapshot = controller.snapshot
    if snapshot.loaded_at is not None:
        st.caption(f"Loaded at {snapshot.loaded_at:%Y-%m-%d %H:%M} UTC")

snapshot = controller.snapshot
st.title("K9 Training Dashboard")
dashboard_tab, entry_tab, roster_tab, team_tab = st.tabs(["Dashboard", "Rapid entry", "Roster", "Team"])

# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

with dashboard_tab:
    metrics = metrics_service.summarize(snapshot.sessions, snapshot.dogs, mode, trainers=snapshot.trainers)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Global accuracy", f"{metrics.global_accuracy.value:.1f}%")
    secondary_label = "Avg. successes / session" if mode is SessionMode.TRAINING else "False positives"
    col2.metric(secondary_label, f"{metrics.secondary_metric.value:g}")
    col3.metric("Active dogs", metrics.active_dogs)
    col4.metric("Sessions this week", metrics.window_volume)

    st.subheader(f"Daily accuracy {metrics.window.start:%d/%m} - {metrics.window.end:%d/%m}")
    st.line_chart(_metrics_frame(metrics))

    st.subheader("Top dogs")
    if metrics.top_dogs:
        st.dataframe(_performance_frame(metrics.top_dogs), use_container_width=True, hide_index=True)
    else:
        st.info("No sessions in the current window.")

# ---------------------------------------------------------------------------
# Rapid entry
# ---------------------------------------------------------------------------

with entry_tab:
    queue: RapidEntryQueue = st.session_state.entry_queue
    if not snapshot.dogs or not snapshot.trainers:
        st.info("Load dogs and trainers before entering sessions.")
    else:
        dog_names = {dog.id: dog.name for dog in snapshot.dogs}
        trainer_names = {trainer.id: trainer.name for trainer in snapshot.trainers}
        dog_id = st.selectbox("Dog", options=list(dog_names), format_func=dog_names.get)
        trainer_id = st.selectbox("Trainer", options=list(trainer_names), format_func=trainer_names.get)
        session_date = st.date_input("Date", value=date.today())
        reinforcers = st.multiselect("Reinforcers", options=list(REINFORCERS), default=[REINFORCERS[0]])
        schedule = st.selectbox("Schedule", options=list(SCHEDULES))

        fields: dict[str, Any] = {}
        if mode is SessionMode.TRAINING:
            module = st.selectbox("Module", options=list(MODULES))
            fields.update(
                record_type=st.selectbox("Record type", options=list(RECORD_TYPES), index=1),
                module=module,
                target_odor=st.selectbox("Objective", options=list(objectives_for_module(module))),
                ua_c=st.number_input("UA correct", min_value=0, value=0, step=1),
                ua_i=st.number_input("UA incorrect", min_value=0, value=0, step=1),
            )
        else:
            result_label = st.radio("Result", options=["-"] + [r.value for r in SampleResult], horizontal=True)
            fields.update(
                sample_id=st.text_input("Sample id"),
                position=st.text_input("Position"),
                result=SampleResult.parse(result_label),
            )
        notes = st.text_area("Notes", height=80)

        form = RapidEntryForm(
            mode=mode,
            dog_id=dog_id,
            trainer_id=trainer_id,
            session_date=session_date,
            reinforcers=tuple(reinforcers),
            schedule=schedule,
            notes=notes,
            **fields,
        )

        save_col, queue_col = st.columns(2)
        if save_col.button("Save now", type="primary", use_container_width=True):
            try:
                _alert(controller.save_sessions([create_session(form)]))
            except RapidEntryValidationError as exc:
                st.error(str(exc))
        if queue_col.button("Add to batch", use_container_width=True):
            try:
                queue.add(form)
            except RapidEntryValidationError as exc:
                st.error(str(exc))

        st.subheader(f"Pending batch ({len(queue)})")
        for entry in list(queue.entries):
            row_col, remove_col = st.columns([5, 1])
            row_col.write(
                f"{dog_names.get(entry.form.dog_id, '?')} · {entry.form.session_date:%d/%m/%Y} · "
                f"{entry.form.module if entry.form.mode is SessionMode.TRAINING else entry.form.sample_id}"
            )
            if remove_col.button("Remove", key=f"remove-{entry.temp_id}"):
                queue.remove(entry.temp_id)
                st.rerun()
        if st.button("Save batch", disabled=len(queue) == 0, use_container_width=True):
            _alert(controller.save_sessions(queue.commit()))

# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

with roster_tab:
    roster = dog_roster(snapshot.dogs, snapshot.sessions, mode)
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "name": entry.dog.name,
                    "breed": entry.dog.breed,
                    "level": entry.dog.level.value,
                    "sessions": entry.total_sessions,
                    "accuracy": round(entry.accuracy, 1),
                }
                for entry in roster
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )

    if roster:
        selected_dog_id = st.selectbox(
            "Dog profile",
            options=[entry.dog.id for entry in roster],
            format_func=lambda dog_id: find_by_id(snapshot.dogs, dog_id).name,
        )
        profile = dog_profile(find_by_id(snapshot.dogs, selected_dog_id), snapshot.sessions, mode)
        st.progress(profile.progress_percent / 100, text=f"Modules: {profile.unique_modules}/{len(MODULES)}")
        if profile.current is not None:
            st.metric(
                f"Current: {profile.current.module} / {profile.current.objective}",
                f"{profile.current.accuracy:.0f}%",
            )
        for group in reversed(profile.previous):
            st.caption(f"{group.module} / {group.objective}: {group.accuracy:.0f}% ({len(group.sessions)} sessions)")

    with st.expander("Add dog"):
        with st.form("new-dog"):
            name = st.text_input("Name")
            breed = st.text_input("Breed")
            age = st.number_input("Age", min_value=0, value=0)
            if st.form_submit_button("Add") and name.strip():
                _alert(controller.add_dog(new_dog(name, breed, age)))

# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

with team_tab:
    ranking = team_ranking(snapshot.trainers, snapshot.sessions)
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "name": standing.trainer.name,
                    "role": standing.trainer.role,
                    "sessions": standing.total_sessions,
                    "success rate": round(standing.success_rate, 1),
                }
                for standing in ranking
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )

    if ranking:
        selected_trainer_id = st.selectbox(
            "Trainer profile",
            options=[standing.trainer.id for standing in ranking],
            format_func=lambda trainer_id: find_by_id(snapshot.trainers, trainer_id).name,
        )
        tprofile = trainer_profile(find_by_id(snapshot.trainers, selected_trainer_id), snapshot.sessions)
        tcol1, tcol2, tcol3 = st.columns(3)
        tcol1.metric("Success rate", f"{tprofile.success_rate:.1f}%", tprofile.efficiency)
        tcol2.metric("Dogs", tprofile.unique_dogs)
        tcol3.metric("UA per day", f"{tprofile.average_per_day:.1f}")
        if tprofile.daily:
            st.line_chart(
                pd.DataFrame(
                    [{"date": stat.date, "rate": stat.accuracy} for stat in tprofile.daily]
                ).set_index("date")
            )

    with st.expander("Add trainer"):
        with st.form("new-trainer"):
            trainer_name = st.text_input("Name")
            role = st.text_input("Role")
            if st.form_submit_button("Add") and trainer_name.strip():
                _alert(controller.add_trainer(new_trainer(trainer_name, role)))
