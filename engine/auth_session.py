"""
Signed-in session state
"""
from typing import Optional

from models.entities import User
from services.auth_service import AuthService
from services.errors import ApiError
from utils.logging_config import logger


class AuthSession:
    """
    Holds the current user and exposes login/logout.
    One instance lives in the Streamlit session state.
    """

    def __init__(self, auth_service: AuthService):
        self.auth = auth_service
        self.user: Optional[User] = None
        self.restored = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def restore(self) -> Optional[User]:
        """Validate a persisted token once per session"""
        if self.restored:
            return self.user
        self.restored = True

        if not self.auth.get_access_token():
            return None
        try:
            self.user = self.auth.get_current_user()
        except ApiError as e:
            logger.error(f"Failed to fetch user: {e}")
            self.auth.logout()
            self.user = None
        return self.user

    def login(self, email: str, password: str) -> User:
        """Raises AuthenticationError or ApiError; message is shown verbatim"""
        response = self.auth.login(email, password)
        self.user = response.user
        self.restored = True
        logger.info(f"User {self.user.email} signed in as {self.user.role}")
        return self.user

    def logout(self):
        self.auth.logout()
        self.user = None
