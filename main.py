# main.py
# Creativity League – Streamlit front end.
# Four screens over local JSON storage: daily prompts, weekly task, league
# leaderboard against simulated competitors, and profile/history.
# Run with: streamlit run main.py

import os
import logging
from typing import Dict, Any, Optional

import streamlit as st

from creativity_league import config, VERSION
from creativity_league.attachments import save_uploads, with_uploads
from creativity_league.clock import (
    VirtualClock, format_countdown, until_midnight, until_next_week, week_key,
)
from creativity_league.competitors import build_leaderboard, edit_competitor
from creativity_league.errors import LeagueError
from creativity_league.history import delete_submission, edit_profile, filter_submissions
from creativity_league.prompts import has_submitted_today, load_or_rotate, select_prompt, submit_response
from creativity_league.rollover import Scheduler
from creativity_league.storage import JsonFileStore, Storage
from creativity_league import weekly

logger = logging.getLogger("creativity_league.app")


# -----------------------------
# Styling
# -----------------------------

WARM_CSS = """
<style>
:root{ --cream:#FFFDF7; --surface:#FFFAED; --golden:#FFD88D; --amber:#FFC247;
       --brown:#A8907C; --deep:#4A3F35; --success:#88C057; --error:#E07856; }
html, body, .stApp { background: var(--cream)!important; color: var(--deep); }

.card {
  background: var(--surface);
  border: 1px solid var(--golden);
  border-radius: 16px;
  padding: 14px 18px;
  margin-bottom: 10px;
}
.points { color: var(--amber); font-weight: 700; }
.muted { color: var(--brown); font-size: 13px; }
.me { border: 2px solid var(--amber); }
</style>
"""

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


# -----------------------------
# Session wiring
# -----------------------------

def mark_dirty():
    st.session_state["dirty"] = True


def on_day_rollover():
    st.session_state["prompt_state"] = None
    mark_dirty()


def on_week_rollover():
    mark_dirty()


def on_competitors_changed(competitors):
    mark_dirty()


def init_session():
    if "storage" in st.session_state:
        return
    storage = Storage(JsonFileStore(config.SAVE_DIR))
    clock = VirtualClock()
    competitors = storage.load_competitors()
    st.session_state["storage"] = storage
    st.session_state["clock"] = clock
    st.session_state["user"] = storage.load_user()
    st.session_state["competitors"] = competitors
    st.session_state["prompt_state"] = None
    st.session_state["dirty"] = False
    st.session_state["scheduler"] = Scheduler(
        clock, storage, competitors,
        on_day_rollover=on_day_rollover,
        on_week_rollover=on_week_rollover,
        on_competitors_changed=on_competitors_changed,
    )


def show_avatar(ref: Optional[str], width: int = 48):
    if ref and os.path.exists(ref):
        st.image(ref, width=width)
    else:
        st.markdown("👤")


def run_action(fn, *args, success: Optional[str] = None, **kwargs):
    """Run a core action and turn rejected input into a warning."""
    try:
        result = fn(*args, **kwargs)
    except LeagueError as e:
        st.warning(str(e))
        return None
    except OSError as e:
        logger.exception("Storage failure")
        st.error(f"Could not save: {e}")
        return None
    if success:
        st.toast(success)
    return result


# -----------------------------
# Master tick
# -----------------------------

@st.fragment(run_every=config.TICK_SECONDS)
def ticker():
    scheduler: Scheduler = st.session_state["scheduler"]
    try:
        scheduler.tick()
    except OSError as e:
        # state is whatever was last written; try again next tick
        logger.warning("Tick failed: %s", e)
    now = st.session_state["clock"].now()
    st.caption(
        f"🕐 {now:%a %Y-%m-%d %H:%M} · new prompts in {format_countdown(until_midnight(now))}"
        f" · new week in {format_countdown(until_next_week(now))}"
    )
    if st.session_state.get("dirty"):
        st.session_state["dirty"] = False
        st.rerun()


# -----------------------------
# Screens
# -----------------------------

def header_section(state: Dict[str, Any]):
    st.markdown(WARM_CSS, unsafe_allow_html=True)
    st.title(f"🎨 {config.APP_TITLE}")
    user = state["user"]
    c1, c2 = st.columns([3, 1])
    with c1:
        st.markdown(f"**{user.username}** · <span class='points'>{user.total_points} pts</span>",
                    unsafe_allow_html=True)
    with c2:
        st.caption(f"v{VERSION}")
    ticker()


def daily_section(state: Dict[str, Any]):
    clock, storage, user = state["clock"], state["storage"], state["user"]
    if state.get("prompt_state") is None:
        state["prompt_state"] = load_or_rotate(clock, storage)
    prompts = state["prompt_state"]

    st.subheader("Choose Today's Creative Challenge")
    if has_submitted_today(user, clock.now()):
        st.success("You already submitted today. Come back tomorrow!")
        return

    for i, p in enumerate(prompts.prompts):
        selected = prompts.selected_prompt_index == i
        cols = st.columns([5, 1])
        cols[0].markdown(
            f"<div class='card{' me' if selected else ''}'>{p['text']} "
            f"<span class='points'>+{p['points']}</span></div>",
            unsafe_allow_html=True,
        )
        if not selected and cols[1].button("Pick", key=f"pick_{i}"):
            run_action(select_prompt, prompts, i, storage)
            st.rerun()

    idx = prompts.selected_prompt_index
    if idx is None:
        return
    with st.form("daily_submit", clear_on_submit=True):
        text = st.text_area("Your response")
        files = st.file_uploader("Attachments", accept_multiple_files=True, key="daily_files")
        submitted = st.form_submit_button("Submit")
    if submitted:
        sub = run_action(with_uploads, files, submit_response, user, prompts, idx, text, clock, storage)
        if sub:
            st.success(f"Submitted! You earned {sub.points} points")
            st.rerun()


def weekly_section(state: Dict[str, Any]):
    clock, storage, user = state["clock"], state["storage"], state["user"]
    task = weekly.load_current_task(clock, storage)
    st.subheader(f"Weekly Task · week of {week_key(clock.now())}")

    if task is None:
        with st.form("weekly_create", clear_on_submit=True):
            text = st.text_input("What will you do this week?")
            points = st.number_input("Points", min_value=config.WEEKLY_POINTS_MIN,
                                     max_value=config.WEEKLY_POINTS_MAX,
                                     value=config.WEEKLY_POINTS_DEFAULT, step=1)
            created = st.form_submit_button("Create task")
        if created and run_action(weekly.create_task, user, text, points, clock, storage,
                                  success="Weekly task created!"):
            st.rerun()
        return

    st.markdown(f"<div class='card'>{task.task_text} <span class='points'>+{task.points}</span></div>",
                unsafe_allow_html=True)
    if task.is_completed:
        st.success(f"Completed: {task.completion_text}")
    else:
        with st.form("weekly_complete", clear_on_submit=True):
            text = st.text_area("Describe what you did")
            files = st.file_uploader("Attachments", accept_multiple_files=True, key="weekly_files")
            done = st.form_submit_button("Complete")
        if done:
            res = run_action(with_uploads, files, weekly.complete_task, user, text, clock, storage)
            if res:
                st.success(f"Completed! You earned {res.points} points")
                st.rerun()

    confirm = st.checkbox("Confirm delete" + (" (points will be deducted)" if task.is_completed else ""))
    if st.button("🗑️ Delete weekly task", disabled=not confirm):
        run_action(weekly.delete_task, user, clock, storage, success="Weekly task deleted")
        st.rerun()


def league_section(state: Dict[str, Any]):
    storage, user, competitors = state["storage"], state["user"], state["competitors"]
    st.subheader("🏆 League")
    for row in build_leaderboard(user, competitors):
        cols = st.columns([1, 1, 4, 2])
        cols[0].markdown(MEDALS.get(row["rank"], f"#{row['rank']}"))
        with cols[1]:
            show_avatar(row["avatar"], width=32)
        label = f"**{row['name']}**" + (" (you)" if row["is_user"] else "")
        cols[2].markdown(label)
        cols[3].markdown(f"<span class='points'>{row['points']} pts</span>", unsafe_allow_html=True)

    with st.expander("Edit competitor"):
        names = [c.name for c in competitors]
        idx = st.selectbox("Competitor", range(len(names)), format_func=lambda i: names[i])
        new_name = st.text_input("Name", value=names[idx], key=f"comp_name_{idx}")
        avatar = st.file_uploader("Avatar", type=["png", "jpg", "jpeg"], key=f"comp_avatar_{idx}")
        if st.button("Save competitor"):
            ref = save_uploads([avatar])[0] if avatar else None
            run_action(edit_competitor, competitors, idx, storage, new_name, ref, success="Saved")
            st.rerun()


def profile_section(state: Dict[str, Any]):
    storage, user, scheduler = state["storage"], state["user"], state["scheduler"]
    st.subheader("👤 Profile")
    c1, c2 = st.columns([1, 3])
    with c1:
        show_avatar(user.avatar_ref, width=90)
    with c2:
        st.markdown(f"**{user.username}**")
        st.write(f"Total points: {user.total_points} · Submissions: {len(user.submissions)}")

    with st.expander("Edit profile"):
        name = st.text_input("Name", value=user.username, key="profile_name")
        avatar = st.file_uploader("Avatar", type=["png", "jpg", "jpeg"], key="profile_avatar")
        if st.button("Save profile"):
            ref = save_uploads([avatar])[0] if avatar else None
            run_action(edit_profile, user, storage, name, ref, success="Profile saved")
            st.rerun()

    st.markdown("#### Your Activity")
    f1, f2, f3, f4 = st.columns([3, 2, 2, 2])
    query = f1.text_input("Search submissions...", key="search")
    kind = f2.selectbox("Type", ["all", "daily", "weekly"])
    newest = f3.toggle("Newest first", value=True)
    in_progress = f4.toggle("In progress", value=True)

    items = filter_submissions(user, kind, in_progress, query, newest)
    if not items:
        st.info("No submissions found." if query else "No submissions yet.")
    for s in items:
        cols = st.columns([6, 1])
        tag = "Weekly" if s.is_weekly else "Daily"
        cols[0].markdown(
            f"<div class='card'><span class='muted'>{tag} · {s.date:%Y-%m-%d %H:%M}</span><br>"
            f"{s.text}<br><span class='points'>+{s.points}</span></div>",
            unsafe_allow_html=True,
        )
        for path in s.attachments:
            if os.path.exists(path):
                cols[0].image(path, width=160)
        if cols[1].button("🗑️", key=f"del_{s.id}"):
            run_action(delete_submission, user, s.id, storage, success="Submission deleted")
            st.rerun()

    st.divider()
    with st.expander("Danger zone"):
        if st.button("Clear all data", type="primary"):
            run_action(scheduler.clear_all_data, success="All data cleared")
            state["user"] = storage.load_user()
            state["prompt_state"] = None
            st.rerun()


def debug_sidebar(state: Dict[str, Any]):
    clock: VirtualClock = state["clock"]
    with st.sidebar:
        st.header("🐞 Debug tools")
        active = st.toggle("Fast-forward (1 day / 5 s)", value=clock.is_enabled)
        if active and not clock.is_enabled:
            clock.enable()
            logger.info("Fast-forward on")
            st.rerun()
        elif not active and clock.is_enabled:
            clock.disable()
            logger.info("Fast-forward off")
            st.rerun()
        st.caption("⏩ 1 day / 5 seconds" if clock.is_enabled else "🕐 Real time")


# -----------------------------
# Main App
# -----------------------------

def main():
    st.set_page_config(page_title=config.APP_TITLE, page_icon="🎨", layout="centered")
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    init_session()
    state = st.session_state

    debug_sidebar(state)
    header_section(state)

    tabs = st.tabs(["Daily", "Weekly", "League", "Profile"])
    with tabs[0]:
        daily_section(state)
    with tabs[1]:
        weekly_section(state)
    with tabs[2]:
        league_section(state)
    with tabs[3]:
        profile_section(state)


if __name__ == "__main__":
    main()
