"""
Authentication service
"""
from config import settings
from models.entities import AuthResponse, User
from services.api_client import ApiClient
from services.errors import AuthenticationError

STATUS_MESSAGES = {
    "pending": "Your account is pending approval.",
    "rejected": "Your account has been rejected.",
    "inactive": "Your account is inactive.",
}

ACCESS_DENIED = "Access denied. Only administrators and board members can access this panel."


class AuthService:
    """Login, session check and token handling"""

    def __init__(self, client: ApiClient):
        self.client = client
        self.token_store = client.token_store

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Authenticate against the backend and persist the token.
        Raises AuthenticationError when the account may not use the panel;
        nothing is persisted in that case.
        """
        data = self.client.post("/auth/login", json={"email": email, "password": password})
        response = AuthResponse.from_dict(data or {})
        user = response.user

        if user.role not in settings.PANEL_ROLES:
            raise AuthenticationError(ACCESS_DENIED)

        if user.status in STATUS_MESSAGES:
            raise AuthenticationError(STATUS_MESSAGES[user.status])

        if not response.access_token:
            raise AuthenticationError("Login response did not include an access token.")

        self.token_store.save(response.access_token, response.refresh_token)
        return response

    def get_current_user(self) -> User:
        return User.from_dict(self.client.get("/users/me") or {})

    def logout(self):
        self.token_store.clear()

    def get_access_token(self):
        return self.token_store.get_access_token()

    def is_authenticated(self) -> bool:
        return self.token_store.is_authenticated()
