import asyncio
import base64
import logging
import smtplib
from datetime import datetime
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from eventhub.constant_file import (
    eventhub_email,
    eventhub_email_password,
    smtp_host,
    smtp_port,
    ticket_subject,
)

logger = logging.getLogger(__name__)


def _format_date(value):
    if isinstance(value, datetime):
        return value.strftime("%B %d, %Y %I:%M %p")
    return str(value) if value else "TBA"


def build_ticket_message(email: str, user_name: str, event_title: str, event_date,
                         venue: str, qr_data_url: str) -> MIMEMultipart:
    message = MIMEMultipart("related")
    message["From"] = eventhub_email or ""
    message["To"] = email
    message["Subject"] = ticket_subject.format(event_title=event_title)

    body = (
        f"Hi {user_name},\n\n"
        f"You are registered for {event_title}.\n"
        f"When: {_format_date(event_date)}\n"
        f"Where: {venue or 'Online'}\n\n"
        "Show the attached QR code at the entrance to check in.\n"
    )
    message.attach(MIMEText(body, "plain"))

    # data:image/png;base64,<payload>
    qr_bytes = base64.b64decode(qr_data_url.split(",", 1)[-1])
    img = MIMEImage(qr_bytes, name="ticket.png")
    img.add_header("Content-ID", "<qrimage>")
    img.add_header("Content-Disposition", "inline", filename="ticket.png")
    message.attach(img)
    return message


async def send_qr_ticket_email(email: str, user_name: str, event_title: str, event_date,
                               venue: str, qr_data_url: str) -> bool:
    if not eventhub_email or not eventhub_email_password:
        logger.warning("SMTP credentials not configured; ticket for %s not sent", email)
        return False

    message = build_ticket_message(email, user_name, event_title, event_date, venue, qr_data_url)

    def send_blocking_email():
        try:
            server = smtplib.SMTP(smtp_host, smtp_port)
            server.starttls()
            server.login(eventhub_email, eventhub_email_password)
            server.sendmail(eventhub_email, email, message.as_string())
            server.quit()
            logger.info("Ticket sent to %s", email)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP error while sending ticket to %s: %s", email, e)
            return False

    return await asyncio.to_thread(send_blocking_email)
