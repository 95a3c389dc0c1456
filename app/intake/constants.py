"""
Defaults applied to incoming appointments.
"""

DEFAULT_PERSON_NAME = "Unknown"
DEFAULT_EVENT_TITLE = "Meeting"
DEFAULT_EVENT_LOCATION = ""
DEFAULT_EVENT_DURATION_SECONDS = 3600
DESCRIPTION_TEMPLATE = "Appointment booked via rcmtoolkit for {email}"

PARTICIPANT_RESPONSE_STATUS = "ACCEPTED"
PARTICIPANT_IS_ORGANIZER = False
