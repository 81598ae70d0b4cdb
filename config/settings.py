"""
Configuration settings for the Condominium Admin Panel
"""
import os
from typing import List

# Backend API Configuration
API_BASE_URL = os.getenv("CONDO_API_URL", "http://localhost:3000")
API_TIMEOUT = float(os.getenv("CONDO_API_TIMEOUT", "15"))

# Session Storage
TOKEN_PATH = os.getenv("CONDO_TOKEN_PATH", "data/session.json")

# Logging
LOG_LEVEL = os.getenv("CONDO_LOG_LEVEL", "INFO")

# Application Settings
APP_TITLE = os.getenv("CONDO_APP_NAME", "Condominio Admin")
APP_ICON = "🏢"

# Domain constants mirrored from the backend
PAYMENT_METHODS: List[str] = ["PAGO_MOVIL", "TRANSFER", "CASH"]
PAYMENT_STATUSES: List[str] = ["PENDING", "APPROVED", "REJECTED"]
INVOICE_STATUSES: List[str] = ["PENDING", "PAID", "CANCELLED"]
USER_ROLES: List[str] = ["resident", "board", "admin"]
USER_STATUSES: List[str] = ["pending", "active", "inactive", "rejected"]
BUILDING_ROLES: List[str] = ["resident", "board", "owner", "auditor", "admin-local"]

# Only these global roles may sign in to the panel
PANEL_ROLES: List[str] = ["admin", "board"]
ADMIN_ROLES: List[str] = ["admin", "superadmin"]
BOARD_ROLE = "board"

# Endpoints whose 401 means the session itself is gone
SESSION_CHECK_PATHS: List[str] = ["/auth/me", "/users/me"]

UNKNOWN_BUILDING_NAME = "Unknown Building"

# Reconciliation tolerance
AMOUNT_TOLERANCE = 0.01  # one cent

# Date Format
DATE_FORMAT = "%b %d, %Y"
PERIOD_FORMAT = "%Y-%m"

# Thread pool used for concurrent fetches within a view
MAX_PARALLEL_REQUESTS = 4
