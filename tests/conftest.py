"""
Pytest fixtures and configuration for rota engine tests.
"""

import pytest
import random
import sys
import os
from datetime import date

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import LeaveRequest, Role, ShiftTemplate, Worker
from utils import week_dates

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']
ALL_DAYS = WEEKDAYS + ['Saturday', 'Sunday']


def make_template(id, role, start="06:00", end="14:00", days=WEEKDAYS, priority=50, name=None):
    return ShiftTemplate.from_dict(
        {
            "id": id,
            "name": name or id,
            "start_time": start,
            "end_time": end,
            "role_id": role.id,
            "days_of_week": list(days),
            "priority": priority,
        },
        role,
    )


@pytest.fixture
def week():
    """Week of Monday 2026-01-05 .. Sunday 2026-01-11."""
    return week_dates(date(2026, 1, 7))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def operator_role():
    return Role(id="operator", name="Operator", weekend_required=True, break_minutes=60)


@pytest.fixture
def packer_role():
    return Role(id="packer", name="Packer", weekend_required=False, break_minutes=30)


@pytest.fixture
def roles(operator_role, packer_role):
    return [operator_role, packer_role]


@pytest.fixture
def workers():
    return [
        Worker(id="W001", name="Alice", role_id="operator", weekly_hours=40, daily_max_hours=8),
        Worker(id="W002", name="Bob", role_id="operator", weekly_hours=40, daily_max_hours=8),
        Worker(id="W003", name="Carol", role_id="operator", weekly_hours=24, daily_max_hours=8),
        Worker(id="W004", name="Dan", role_id="packer", weekly_hours=30, daily_max_hours=8),
        Worker(id="W005", name="Erin", role_id="packer", weekly_hours=20, daily_max_hours=6),
    ]


@pytest.fixture
def templates(operator_role, packer_role):
    return [
        make_template("op_day", operator_role, "06:00", "14:00", WEEKDAYS),
        make_template("op_late", operator_role, "14:00", "22:00", ["Friday", "Saturday", "Sunday"]),
        make_template("op_short", operator_role, "10:00", "14:00", ALL_DAYS, priority=20),
        make_template("pack_am", packer_role, "08:00", "13:30", WEEKDAYS, priority=60),
        make_template("pack_sat", packer_role, "08:00", "12:30", ["Saturday"], priority=10),
    ]


@pytest.fixture
def leave(week):
    return [
        LeaveRequest(worker_id="W001", date=week[1]),
        LeaveRequest(worker_id="W004", date=week[0]),
    ]
