"""
User-facing notifications
"""
from typing import Dict, Optional

import streamlit as st

from services.errors import SessionExpiredError
from utils.logging_config import logger


def notify_error(message: str, error: Optional[Exception] = None):
    """
    Log a failure and show it as a toast; the page keeps rendering.
    An expired session is re-raised so the app can return to the login screen.
    """
    if isinstance(error, SessionExpiredError):
        raise error
    if error is not None:
        logger.error(f"{message}: {error}")
        detail = getattr(error, "message", None) or str(error)
        st.toast(f"❌ {message}: {detail}")
    else:
        st.toast(f"❌ {message}")


def notify_success(message: str):
    logger.info(message)
    st.toast(f"✅ {message}")


def show_form_errors(errors: Dict[str, str]):
    for field, message in errors.items():
        label = field.replace("_", " ").capitalize()
        st.error(f"• {label}: {message}")
