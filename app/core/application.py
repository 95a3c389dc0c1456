"""
Application metadata for the appointment processor.

Mirrors the function manifest of the CRM app: one function reachable over
two unauthenticated route triggers sharing a single path.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class RouteTrigger:
    path: str
    http_method: str
    is_auth_required: bool = False


@dataclass(frozen=True)
class ApplicationInfo:
    display_name: str
    description: str
    function_name: str
    timeout_seconds: int
    triggers: List[RouteTrigger] = field(default_factory=list)


PROCESS_PATH = "/appointment/process"

APPLICATION = ApplicationInfo(
    display_name="Appointment Processor",
    description="Processes appointments from webhooks",
    function_name="process-appointment",
    timeout_seconds=10,
    triggers=[
        RouteTrigger(path=PROCESS_PATH, http_method="GET"),
        RouteTrigger(path=PROCESS_PATH, http_method="POST"),
    ],
)
