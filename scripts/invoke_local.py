#!/usr/bin/env python3
"""
Local Invocation Script

Builds an SNS "submission received" envelope and runs the ProcessSubmission
handler in-process.

Usage:
    # Show the envelope that would be delivered
    python scripts/invoke_local.py --dry-run --url https://example.com/hw1.zip

    # Invoke against the AWS account/endpoints configured via SUBMISSIONS_* variables
    python scripts/invoke_local.py --aws --url https://example.com/hw1.zip \\
        --email jane@example.com --first-name Jane --last-name Doe --assignment HW1
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def build_envelope(args: argparse.Namespace) -> dict:
    """Build a single-record SNS envelope from command-line arguments."""
    submission_time = args.submission_time or (
        datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    )
    message = {
        "userEmail": args.email,
        "submission_url": args.url,
        "firstName": args.first_name,
        "lastName": args.last_name,
        "assignmentName": args.assignment,
        "submissionTime": submission_time,
    }
    return {
        "Records": [
            {
                "EventSource": "aws:sns",
                "Sns": {
                    "Type": "Notification",
                    "MessageId": "local-invocation",
                    "Message": json.dumps(message),
                },
            }
        ]
    }


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Invoke the ProcessSubmission handler locally",
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the envelope without invoking the handler (default)",
    )
    mode_group.add_argument(
        "--aws",
        action="store_true",
        help="Invoke against configured AWS resources (requires credentials)",
    )

    parser.add_argument("--url", required=True, help="Submission archive URL")
    parser.add_argument("--email", default="student@example.com", help="Submitter email")
    parser.add_argument("--first-name", default="Jane", help="Submitter first name")
    parser.add_argument("--last-name", default="Doe", help="Submitter last name")
    parser.add_argument("--assignment", default="HW1", help="Assignment name")
    parser.add_argument(
        "--submission-time",
        default=None,
        help="Submission timestamp (default: now, ISO-8601 UTC)",
    )

    args = parser.parse_args()
    envelope = build_envelope(args)

    if not args.aws:
        print(json.dumps(envelope, indent=2))
        return 0

    from lambdas.process_submission.handler import lambda_handler
    from submissions.tools.dynamodb import load_outcome

    response = lambda_handler(envelope, None)
    print(json.dumps(response, indent=2))
    if response["statusCode"] != 200:
        return 1

    result = json.loads(response["body"])
    if result["recorded"]:
        record = load_outcome(result["record_id"])
        if record is not None:
            print(record.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
