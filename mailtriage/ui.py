import streamlit as st

from mailtriage.client import EmailApiClient
from mailtriage.config import DashboardConfig
from mailtriage.dashboard.controller import DashboardController, MIN_SPLIT, MAX_SPLIT, MOBILE_BREAKPOINT
from mailtriage.dashboard.preferences import PreferenceStore
from mailtriage.errors import NetworkFailure
from mailtriage.services.email.classification import Bucket, is_important
from mailtriage.services.email.view import preview

config = DashboardConfig()

st.set_page_config(
    page_title="MailTriage",
    page_icon="📬",
    layout="wide"
)

DARK_CSS = """
<style>
.stApp { background-color: #000000; color: #d1d5db; }
section[data-testid="stSidebar"] { background-color: #111827; }
</style>
"""

# --- Login ---

if "client" not in st.session_state:
    st.session_state.client = EmailApiClient(config.api_url)

client = st.session_state.client

if not client.token:
    st.title("📬 MailTriage")
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        try:
            client.login(email, password)
            st.rerun()
        except NetworkFailure as e:
            if e.status_code == 401:
                st.error("Invalid credentials")
            else:
                st.error("🔴 Cannot connect to MailTriage API. Is it running?")
    st.stop()

# --- Dashboard state (one controller per browser session) ---

if "controller" not in st.session_state:
    controller = DashboardController(
        client,
        preferences=PreferenceStore(config.prefs_path),
        viewport_width=config.viewport_width,
    )
    with st.spinner("Loading emails..."):
        controller.load()
    st.session_state.controller = controller

controller: DashboardController = st.session_state.controller
state = controller.state

if state.is_dark_theme:
    st.markdown(DARK_CSS, unsafe_allow_html=True)

def logout():
    client.token = None
    del st.session_state["controller"]

def render_email(record):
    st.subheader(record.subject)
    st.write(f"From: {record.sender}")
    st.caption(record.date.strftime("%b %d, %Y %I:%M %p") if record.date else "")
    important = is_important(record)
    if important:
        st.markdown("⭐ **Important**")

    left, right = st.columns(2)
    left.button(
        "Move to Regular" if important else "Move to Important",
        key=f"toggle-open-{record.id}",
        on_click=controller.toggle_importance,
        args=(record.id,),
    )
    right.button("🗑️ Delete", key=f"delete-open-{record.id}", on_click=controller.delete_email, args=(record.id,))
    st.divider()
    st.text(record.content)

def render_list():
    st.header(controller.view_title)
    st.caption(f"{controller.counts[state.active_bucket]} emails")

    if state.error_message:
        st.error(state.error_message)
        st.button("Dismiss", key="dismiss-error", on_click=controller.dismiss_error)

    emails = controller.visible_emails
    if not emails:
        st.info("📭 No emails found")
        return

    for record in emails:
        with st.container(border=True):
            star = " ⭐" if is_important(record) else ""
            label = f"**{record.sender}**{star}" if not record.is_read else f"{record.sender}{star}"
            if record.id == state.selected_id:
                label = f"▶ {label}"
            st.markdown(label)
            st.caption(preview(record.content))
            st.caption(record.date.strftime("%x") if record.date else "")

            open_col, toggle_col, delete_col = st.columns([2, 2, 1])
            open_col.button("Open", key=f"open-{record.id}", on_click=controller.select, args=(record.id,))
            toggle_col.button(
                "Move to Regular" if is_important(record) else "Move to Important",
                key=f"toggle-{record.id}",
                on_click=controller.toggle_importance,
                args=(record.id,),
            )
            delete_col.button("🗑️", key=f"delete-{record.id}", on_click=controller.delete_email, args=(record.id,))

# --- Sidebar: navigation & settings ---
with st.sidebar:
    st.title("📬 MailTriage")
    counts = controller.counts
    st.button(
        f"⭐ Important ({counts[Bucket.IMPORTANT]})",
        use_container_width=True,
        type="primary" if state.active_bucket == Bucket.IMPORTANT else "secondary",
        on_click=controller.switch_bucket,
        args=(Bucket.IMPORTANT,),
    )
    st.button(
        f"📥 Regular ({counts[Bucket.REGULAR]})",
        use_container_width=True,
        type="primary" if state.active_bucket == Bucket.REGULAR else "secondary",
        on_click=controller.switch_bucket,
        args=(Bucket.REGULAR,),
    )
    st.divider()

    st.button("🌙 Dark mode" if not state.is_dark_theme else "☀️ Light mode", on_click=controller.toggle_theme)
    compact = st.toggle("Compact layout", value=state.is_mobile_layout)
    if compact != state.is_mobile_layout:
        controller.set_viewport(MOBILE_BREAKPOINT - 1 if compact else config.viewport_width)
        st.rerun()

    if controller.show_reading_pane:
        ratio = st.slider("List width (%)", MIN_SPLIT, MAX_SPLIT, int(state.split_ratio))
        if ratio != int(state.split_ratio):
            # The slider reports percentages, so the container spans 0..100
            with controller.drag(0, 100) as drag:
                drag.move(ratio)
            st.rerun()

    st.button("🔄 Refresh", on_click=controller.refresh)
    st.button("Sign out", on_click=logout)

# --- Main area ---
search = st.text_input("🔍 Search emails...", value=state.search_text)
if search != state.search_text:
    controller.search(search)
    st.rerun()

selected = controller.selected_email

if state.is_mobile_layout and selected:
    st.button("← Back", on_click=controller.clear_selection)
    render_email(selected)
elif controller.show_reading_pane:
    list_pane, reading_pane = st.columns([controller.list_width, 100 - controller.list_width])
    with list_pane:
        render_list()
    with reading_pane:
        render_email(selected)
else:
    render_list()
