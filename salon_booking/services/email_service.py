import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from salon_booking.core.config import settings
from salon_booking.models.booking import Booking

logger = logging.getLogger(__name__)


def _send_email_sync(to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Use from background task."""
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send")
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        server.login(settings.smtp_user, settings.smtp_password)
        server.sendmail(settings.from_email, [to_email], msg.as_string())
    logger.info("Email sent to %s", to_email)


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _is_email(contact: str) -> bool:
    return "@" in contact


def _slot_display(booking: Booking) -> tuple[str, str]:
    date_str = booking.start_at.strftime("%A, %B %d, %Y")
    time_str = f"{booking.start_at.strftime('%I:%M %p')} – {booking.end_at.strftime('%I:%M %p')}"
    return date_str, time_str


def _wrap_html(title: str, heading: str, body_html: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="margin:0;padding:0;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;background-color:#f3f4f6;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color:#f3f4f6;">
    <tr>
      <td align="center" style="padding:40px 16px;">
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:560px;background:#ffffff;border-radius:12px;overflow:hidden;">
          <tr>
            <td style="padding:32px;">
              <h1 style="margin:0 0 8px 0;font-size:22px;font-weight:600;color:#111827;">{heading}</h1>
              {body_html}
            </td>
          </tr>
          <tr>
            <td style="padding:24px 32px;background:#f9fafb;border-top:1px solid #e5e7eb;">
              <p style="margin:0;font-size:13px;font-weight:600;color:#111827;">{settings.site_name}</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def build_waitlist_notification_html(booking: Booking) -> str:
    """Body for the 'slot opened up' message sent to waitlisted customers."""
    date_str, time_str = _slot_display(booking)
    link_html = ""
    if settings.booking_url:
        link_html = (
            f'<p style="margin:24px 0 0 0;"><a href="{_html_escape(settings.booking_url)}" '
            f'style="color:#2563eb;font-weight:600;">Book now</a></p>'
        )
    body = f"""
              <p style="margin:0 0 16px 0;font-size:15px;color:#6b7280;">Hi there, a slot you were waiting for has become available.</p>
              <p style="margin:0;font-size:16px;font-weight:600;color:#111827;">{date_str}</p>
              <p style="margin:4px 0 16px 0;font-size:16px;font-weight:600;color:#111827;">{time_str}</p>
              <p style="margin:0;font-size:14px;color:#374151;">This spot is in high demand. Book now before it's gone.</p>
              {link_html}
    """
    return _wrap_html("Slot available", "An appointment slot has opened up!", body)


def build_booking_confirmation_html(recipient_name: str, booking: Booking) -> str:
    date_str, time_str = _slot_display(booking)
    body = f"""
              <p style="margin:0 0 16px 0;font-size:15px;color:#6b7280;">Hi {recipient_name or 'there'}, your appointment is booked.</p>
              <p style="margin:0;font-size:16px;font-weight:600;color:#111827;">{date_str}</p>
              <p style="margin:4px 0 16px 0;font-size:16px;font-weight:600;color:#111827;">{time_str}</p>
              <p style="margin:0;font-size:14px;color:#374151;">If you need to reschedule or cancel, please contact us.</p>
    """
    return _wrap_html("Appointment Confirmation", "Appointment Confirmed", body)


def send_waitlist_notification_email(to_email: str, booking: Booking) -> None:
    if not _is_email(to_email):
        logger.debug("Waitlist contact %s is not an email address, skipping", to_email)
        return
    subject = f"{settings.site_name} – An appointment slot has opened up!"
    _send_email_sync(to_email, subject, build_waitlist_notification_html(booking))


def send_booking_confirmation_email(booking: Booking) -> None:
    """Compose and send booking confirmation (call from background task)."""
    if not _is_email(booking.customer_contact):
        return
    subject = f"{settings.site_name} – Appointment Confirmed"
    html = build_booking_confirmation_html(_html_escape(booking.customer_name), booking)
    try:
        _send_email_sync(booking.customer_contact, subject, html)
    except Exception as e:
        logger.exception("Failed to send confirmation to %s: %s", booking.customer_contact, e)


async def notify_waitlist_by_email(contact: str, booking: Booking) -> None:
    """Waitlist notifier: runs the blocking SMTP send off the event loop."""
    await asyncio.to_thread(send_waitlist_notification_email, contact, booking)
