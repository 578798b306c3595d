import logging

from core.functions_client import FunctionsClient, functions_client

logger = logging.getLogger(__name__)


def waitlist_decision_content(name: str, property_title: str, accepted: bool) -> dict:
    if accepted:
        subject = "Your waitlist request was approved"
        body = (
            f"<p>Great news! Your waitlist request for <strong>{property_title}</strong> "
            "has been approved. You can now view the full property details and the "
            "seller's contact information.</p>"
        )
    else:
        subject = "Your waitlist request was declined"
        body = (
            f"<p>Unfortunately, your waitlist request for <strong>{property_title}</strong> "
            "has been declined.</p>"
        )

    html_content = f"""
        <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6;">
            <h2>Waitlist Update</h2>
            <p>Hello {name},</p>
            {body}
            <p>Best regards,<br>The Realer Estate Team</p>
        </body>
        </html>
        """
    return {"subject": subject, "html": html_content}


async def send_waitlist_decision_email(
    email: str,
    name: str,
    property_title: str,
    accepted: bool,
    client: FunctionsClient | None = None,
) -> dict:
    client = client or functions_client
    content = waitlist_decision_content(name, property_title, accepted)
    result = await client.send_email({"to": email, **content})
    if not result["success"]:
        logger.warning(
            f"Waitlist decision email to {email} not sent: {result.get('error')}"
        )
    return result
