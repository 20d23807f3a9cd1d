import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from padel_app.accounts.service import SESSION_EXPIRED, AccountError, AccountService, AuthSession
from padel_app.config import SESSION_KEY, ConfigurationError, FirebaseSettings
from padel_app.ingestion.paste_mode import SOURCE_TEXT, ValidationError, collect_results
from padel_app.ranking.engine import calculate_ranking, results_breakdown
from padel_app.services.firebase import FirebaseClient
from padel_app.utils import setup_logging

logger = setup_logging(__name__)

# --- Page Configuration ---
st.set_page_config(
    page_title="PADEL-APP",
    page_icon="🎾",
    layout="centered",
    initial_sidebar_state="collapsed"
)

# --- Design System ---
ACCENT_COLORS = {
    "primary": "#5A67D8",       # Indigo - buttons and links
    "primary_dark": "#434190",
    "success": "#38A169",       # Green - confirmations
    "danger": "#E53E3E",        # Red - errors
    "player1": "#2F415A",       # Slate - player 1 series
    "player2": "#6FA17B",       # Sage - player 2 series
}

CUSTOM_CSS = f"""
<style>
    .stApp {{
        background: linear-gradient(135deg, {ACCENT_COLORS["player1"]} 0%, {ACCENT_COLORS["player2"]} 100%);
    }}
    [data-testid="stForm"] {{
        background: white;
        border-radius: 0.5rem;
        box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
    }}
    .auth-link a {{
        font-size: 0.875rem;
        color: {ACCENT_COLORS["primary"]};
    }}
    .auth-link a:hover {{
        color: {ACCENT_COLORS["primary_dark"]};
    }}
</style>
"""

# Pages addressable through ?page=<slug>
PAGES = ("login", "register", "reset-password", "home")
DEFAULT_PAGE = "home"


def go_to(page):
    """Switch page by rewriting the query string and rerunning the script."""
    st.query_params.clear()
    st.query_params["page"] = page
    st.rerun()


def page_link(page, label):
    """Anchor link to another page that stays in the same browser tab."""
    st.markdown(
        f'<p class="auth-link"><a href="?page={page}" target="_self">{label}</a></p>',
        unsafe_allow_html=True
    )


def show_field_errors(error):
    """Render an AccountError: one line per invalid field, then the summary."""
    for message in error.field_errors.values():
        st.error(message)
    if not error.field_errors or error.message not in error.field_errors.values():
        st.error(error.message)


def apply_plotly_style(fig):
    """Transparent backgrounds and neutral grid so charts sit on the page gradient."""
    system_font = '-apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif'
    grid_color = "rgba(128, 128, 128, 0.4)"

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(family=system_font, size=16),
        xaxis=dict(showgrid=False, zeroline=False),
        yaxis=dict(gridcolor=grid_color, zeroline=False, rangemode="tozero"),
        showlegend=False,
        dragmode=False,  # Disable pan/zoom to prevent scroll hijacking on mobile
    )
    return fig


# --- Backend ---
@st.cache_resource
def get_account_service():
    """Build the backend client once per process and inject it into the service."""
    settings = FirebaseSettings.from_env()
    return AccountService(FirebaseClient(settings))


def current_session():
    return st.session_state.get(SESSION_KEY)


# --- Pages ---
def render_login(service):
    st.title("Sign in")

    with st.form("sign_in_form"):
        email = st.text_input("E-mail", autocomplete="email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        with st.spinner("Signing in..."):
            try:
                session = service.sign_in(email, password)
            except AccountError as e:
                show_field_errors(e)
            else:
                st.session_state[SESSION_KEY] = session
                go_to("home")

    page_link("reset-password", "Forgot your password?")
    page_link("register", "No account? Register here")


def render_register(service):
    st.title("Create account")

    with st.form("sign_up_form"):
        name = st.text_input("User name", autocomplete="off")
        email = st.text_input("E-mail", autocomplete="email")
        password = st.text_input("Password", type="password")
        confirm_password = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Create account")

    if submitted:
        with st.spinner("Creating account..."):
            try:
                service.register(name, email, password, confirm_password)
            except AccountError as e:
                show_field_errors(e)
            else:
                go_to("login")

    page_link("login", "Already have an account? Sign in here")


def render_reset_password(service):
    st.title("Recover password")

    with st.form("reset_password_form"):
        email = st.text_input("E-mail", placeholder="Your e-mail address")
        submitted = st.form_submit_button("Send recovery e-mail")

    if submitted:
        with st.spinner("Sending..."):
            try:
                st.success(service.request_password_reset(email))
            except AccountError as e:
                st.error(e.message)

    page_link("login", "Back to sign in")


def render_user_select(service, session: AuthSession):
    st.subheader("Select a user")

    try:
        users = service.list_users(session)
    except AccountError as e:
        if e.message == SESSION_EXPIRED:
            service.sign_out(st.session_state)
            go_to("login")
        st.error(e.message)
        return

    by_id = {user.id: user for user in users}
    selected_id = st.selectbox(
        "User",
        options=[None] + list(by_id),
        format_func=lambda uid: "Select..." if uid is None else by_id[uid].name,
        key="selected_user_id",
        label_visibility="collapsed"
    )
    if selected_id is not None:
        st.write(f"You selected user: **{by_id[selected_id].name}**")


def render_ranking_calculator(player1_label="Player 1", player2_label="Player 2"):
    st.subheader("Ranking calculator")
    st.caption("3 points for a win, 1 point each for a tie.")

    table_tab, paste_tab = st.tabs(["📋 Table", "📝 Paste"])

    with table_tab:
        edited = st.data_editor(
            pd.DataFrame({"score_player1": pd.Series(dtype="Int64"), "score_player2": pd.Series(dtype="Int64")}),
            num_rows="dynamic",
            column_config={
                "score_player1": st.column_config.NumberColumn(player1_label, step=1),
                "score_player2": st.column_config.NumberColumn(player2_label, step=1),
            },
            key="results_editor",
            use_container_width=True,
        )
    with paste_tab:
        pasted = st.text_area("One match per line, e.g. 6-3", key="results_text", height=150)

    try:
        source, results = collect_results(pasted, edited.to_dict("records"))
    except ValidationError as e:
        st.error(str(e))
        return

    if source == SOURCE_TEXT:
        st.caption("📝 Using the pasted results. Clear the Paste tab to use the table instead.")
    else:
        st.caption("📋 Using the results table.")

    totals = calculate_ranking(results)
    col1, col2 = st.columns(2)
    col1.metric(player1_label, f"{totals.player1} pts")
    col2.metric(player2_label, f"{totals.player2} pts")

    if not results:
        st.info("Add match results to see the standings.")
        return

    fig = go.Figure(go.Bar(
        x=[player1_label, player2_label],
        y=[totals.player1, totals.player2],
        marker_color=[ACCENT_COLORS["player1"], ACCENT_COLORS["player2"]],
        text=[totals.player1, totals.player2],
        textposition="outside",
    ))
    fig.update_layout(yaxis_title="Points", height=320)
    st.plotly_chart(apply_plotly_style(fig), use_container_width=True, config={'displayModeBar': False, 'scrollZoom': False})

    with st.expander("Match by match"):
        st.dataframe(results_breakdown(results), hide_index=True, use_container_width=True)


def render_home(service):
    session = current_session()
    if session is None:
        go_to("login")

    st.title("PADEL-APP")
    st.write(f"Hello, {session.name or session.email}!")
    if st.button("Sign out"):
        service.sign_out(st.session_state)
        go_to("login")

    render_user_select(service, session)
    st.divider()
    render_ranking_calculator()


# --- Main App ---
def main():
    st.html(CUSTOM_CSS)

    try:
        service = get_account_service()
    except ConfigurationError as e:
        logger.error(str(e))
        st.error(str(e))
        return

    page = st.query_params.get("page", DEFAULT_PAGE)
    if page not in PAGES:
        page = DEFAULT_PAGE

    if page == "login":
        render_login(service)
    elif page == "register":
        render_register(service)
    elif page == "reset-password":
        render_reset_password(service)
    else:
        render_home(service)


if __name__ == "__main__":
    main()
