"""
Login screen
"""
import streamlit as st

from config import settings
from engine.auth_session import AuthSession
from models.schemas import LoginForm
from services.errors import ApiError, AuthenticationError
from ui.feedback import show_form_errors
from utils.validations import validate_form


def render_login(auth_session: AuthSession) -> bool:
    """
    Render the login form.
    Returns True when the user signed in during this run.
    """
    st.title(f"{settings.APP_ICON} {settings.APP_TITLE}")
    st.caption("Administrators and board members only")

    with st.form(key="login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)

    if not submitted:
        return False

    form, errors = validate_form(LoginForm, {"email": email, "password": password})
    if errors:
        show_form_errors(errors)
        return False

    with st.spinner("Signing in…"):
        try:
            auth_session.login(form.email, form.password)
        except AuthenticationError as e:
            st.error(str(e))
            return False
        except ApiError as e:
            st.error(e.message)
            return False

    return True
