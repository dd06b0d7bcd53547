"""
Alert email sending through MS Graph.
"""

from datetime import datetime, timezone

from msgraph.generated.models.body_type import BodyType
from msgraph.generated.models.email_address import EmailAddress
from msgraph.generated.models.item_body import ItemBody
from msgraph.generated.models.message import Message
from msgraph.generated.models.recipient import Recipient
from msgraph.generated.users.item.send_mail.send_mail_post_request_body import (
    SendMailPostRequestBody,
)

from core.config import NOTIFICATION_TITLE
from core.graph_client import get_graph_client


def build_alert_message(message: str, to_email: str, sent_at: datetime | None = None) -> Message:
    """Build the Graph message for an indicator alert."""
    sent_at = sent_at or datetime.now(timezone.utc)
    body_text = (
        f"The meeting indicator could not update its status at {sent_at.isoformat()}:\n\n"
        f"{message}\n\n"
        "The display keeps its previous state until the next successful check."
    )
    return Message(
        subject=NOTIFICATION_TITLE,
        body=ItemBody(content_type=BodyType.Text, content=body_text),
        to_recipients=[Recipient(email_address=EmailAddress(address=to_email))],
    )


async def send_alert_email(message: str, from_email: str, to_email: str, graph=None):
    """Send an alert email from from_email's mailbox."""
    graph = graph or get_graph_client()
    request_body = SendMailPostRequestBody(
        message=build_alert_message(message, to_email),
        save_to_sent_items=False,
    )
    await graph.users.by_user_id(from_email).send_mail.post(request_body)
