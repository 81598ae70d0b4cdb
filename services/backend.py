"""
Bundle of service wrappers sharing one API client
"""
from dataclasses import dataclass

from services.api_client import ApiClient
from services.auth_service import AuthService
from services.billing_service import BillingService
from services.buildings_service import BuildingsService
from services.payments_service import PaymentsService
from services.units_service import UnitsService
from services.users_service import UsersService
from storage.token_store import TokenStore


@dataclass
class Backend:
    client: ApiClient
    auth: AuthService
    buildings: BuildingsService
    units: UnitsService
    users: UsersService
    billing: BillingService
    payments: PaymentsService

    @classmethod
    def create(cls, base_url: str = None, token_store: TokenStore = None) -> "Backend":
        client = ApiClient(base_url=base_url, token_store=token_store)
        return cls(
            client=client,
            auth=AuthService(client),
            buildings=BuildingsService(client),
            units=UnitsService(client),
            users=UsersService(client),
            billing=BillingService(client),
            payments=PaymentsService(client),
        )
