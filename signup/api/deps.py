# signup/api/deps.py
from __future__ import annotations

from fastapi import Request

from signup.services.attendance_ledger import AttendanceLedger
from signup.services.session_registry import SessionRegistry


# ==========================================================
#  COMPONENTS BUILT BY create_app() AND KEPT ON app.state
# ==========================================================
def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_ledger(request: Request) -> AttendanceLedger:
    return request.app.state.ledger
