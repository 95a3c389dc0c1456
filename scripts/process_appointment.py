#!/usr/bin/env python3
"""
Process one appointment against the configured CRM store.

Usage:
  python scripts/process_appointment.py --email jane@example.com --name "Jane Doe" --title Checkup
  python scripts/process_appointment.py --email jane@example.com --start 2025-01-15T14:30:00Z --end 2025-01-15T15:00:00Z
Exit: 0 = processed; 1 = failed.
"""
import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

logging.basicConfig(level=logging.WARNING)

load_dotenv()
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import load_config
from app.core.errors import AppointmentIntakeError
from app.crm.store import select_crm_store
from app.intake.orchestrator import AppointmentProcessor
from app.schemas.appointment import AppointmentPayload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Process one appointment booking")
    parser.add_argument("--email", help="contact email (required by the workflow)")
    parser.add_argument("--name", help="contact display name")
    parser.add_argument("--title", help="event title")
    parser.add_argument("--start", dest="start_time", help="ISO-8601 start time")
    parser.add_argument("--end", dest="end_time", help="ISO-8601 end time")
    parser.add_argument("--location", help="event location")
    parser.add_argument("--description", help="event description")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    payload = AppointmentPayload(
        name=args.name,
        email=args.email,
        title=args.title,
        start_time=args.start_time,
        end_time=args.end_time,
        location=args.location,
        description=args.description,
    )

    try:
        cfg = load_config()
        processor = AppointmentProcessor(
            store=select_crm_store(cfg),
            default_tz=cfg.default_timezone,
            serialize_person_resolution=False,
        )
        result = processor.process(payload)
    except AppointmentIntakeError as exc:
        print(json.dumps({"success": False, "error": exc.kind, "detail": str(exc)}, indent=2))
        return 1

    print(json.dumps(result.model_dump(by_alias=True), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
