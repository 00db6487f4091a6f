"""
Post-release notifications over a Slack incoming webhook and `mail`.
"""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx
import structlog

from repokit.core.error_handler import log_exception
from repokit.core.shell import CommandRunner

logger = structlog.get_logger(__name__)

SLACK_TIMEOUT = 10.0


def slack_payload(version: str, tag: str) -> Dict[str, Any]:
    return {
        "text": f"🎉 Release {version} Post-Processing Complete!",
        "attachments": [
            {
                "color": "good",
                "fields": [
                    {"title": "Version", "value": version, "short": True},
                    {"title": "Tag", "value": tag, "short": True},
                    {
                        "title": "Status",
                        "value": "Post-release tasks completed",
                        "short": False,
                    },
                ],
            }
        ],
    }


@log_exception
def send_slack(
    webhook_url: str, version: str, tag: str, client: Optional[httpx.Client] = None
) -> None:
    """
    POST the release message to a Slack webhook.

    Raises:
        httpx.HTTPError: The request failed or Slack answered with an error status.
    """
    payload = slack_payload(version, tag)
    if client is None:
        with httpx.Client(timeout=SLACK_TIMEOUT) as own_client:
            response = own_client.post(webhook_url, json=payload)
    else:
        response = client.post(webhook_url, json=payload)
    response.raise_for_status()
    logger.info("Slack notification sent", version=version)


def email_subject(version: str) -> str:
    return f"Release {version} - Post-Processing Complete"


def email_body(version: str, tag: str, when: Optional[datetime] = None) -> str:
    when = when or datetime.now()
    return f"""
Release {version} post-processing has been completed successfully.

Release Details:
- Version: {version}
- Tag: {tag}
- Date: {when.strftime("%a %b %d %H:%M:%S %Y")}

Post-Release Tasks Completed:
✅ Release branch cleaned up
✅ Develop branch updated
✅ Release documentation archived
✅ Version tracking updated

Next Steps:
- Monitor app performance and user feedback
- Plan next release cycle
- Update project roadmap

For detailed information, see the release report in the releases/ directory.
"""


@log_exception
def send_email(runner: CommandRunner, recipients: str, version: str, tag: str) -> None:
    runner.run(
        ["mail", "-s", email_subject(version), recipients],
        input=email_body(version, tag),
    )
    logger.info("Email notification sent", recipients=recipients)
