"""
Travel Booking API - Outbound Notifications
============================================

- OTP delivery strategies (email over SMTP, WhatsApp over an HTTP gateway)
  and the factory that picks one per channel.
- Hotel announcement publisher: observers are notified when a hotel is
  created. The bundled observer emails every confirmed user.

Channels that are not configured log a warning and skip sending, so local
development works without SMTP or WhatsApp credentials.
"""

import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage
from enum import Enum
from typing import List, Optional

import httpx
from sqlalchemy.orm import Session

from config import settings
from exceptions import NotificationError, ValidationAppError
from logging_config import get_logger

logger = get_logger(__name__)


class OtpChannel(str, Enum):
    EMAIL = "email"
    WHATSAPP = "whatsapp"


def send_email(to_email: str, subject: str, html_body: str, bcc: Optional[List[str]] = None) -> bool:
    """
    Send one HTML email through the configured SMTP server (STARTTLS).

    Args:
        to_email: Visible recipient.
        subject: Subject line.
        html_body: HTML content.
        bcc: Hidden recipients, delivered in the same SMTP session.

    Returns:
        False if SMTP is not configured and nothing was sent.

    Raises:
        NotificationError: if the SMTP server rejects the message.
    """
    if not settings.smtp_configured:
        logger.warning(f"SMTP not configured, email to {to_email} skipped")
        return False

    msg = EmailMessage()
    msg["From"] = f"{settings.sender_name} <{settings.sender_email}>"
    msg["To"] = to_email
    if bcc:
        msg["Bcc"] = ", ".join(bcc)
    msg["Subject"] = subject
    msg.set_content(html_body, subtype="html")

    try:
        ctx = ssl.create_default_context()
        with smtplib.SMTP(settings.smtp_server, settings.smtp_port, timeout=15) as server:
            server.starttls(context=ctx)
            server.login(settings.smtp_username, settings.app_password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        raise NotificationError(OtpChannel.EMAIL.value, f"Failed to send email: {e}")

    return True


# ==========================================
# OTP STRATEGIES
# ==========================================

class OtpSenderStrategy(ABC):
    """Delivers a one-time passcode to a recipient."""

    channel: OtpChannel

    @abstractmethod
    def send_otp(self, to: str, otp: str) -> None:
        ...


class OtpEmailSenderStrategy(OtpSenderStrategy):
    channel = OtpChannel.EMAIL

    def send_otp(self, to: str, otp: str) -> None:
        body = (
            f"<h3>Your OTP Code is: <b>{otp}</b></h3>"
            f"<p>This code expires in {settings.otp_expiration_minutes} minutes.</p>"
        )
        if send_email(to, "Your OTP Code", body):
            logger.info(f"OTP sent by email to {to}")


class OtpWhatsAppSenderStrategy(OtpSenderStrategy):
    channel = OtpChannel.WHATSAPP

    def __init__(self, client: httpx.Client = None):
        self._client = client

    def send_otp(self, to: str, otp: str) -> None:
        if not settings.whatsapp_configured:
            logger.warning(f"WhatsApp gateway not configured, OTP to {to} skipped")
            return

        url = f"{settings.whatsapp_api_url.rstrip('/')}/{settings.whatsapp_instance_id}/messages/chat"
        payload = {"token": settings.whatsapp_token, "to": to, "body": f"Your OTP is: {otp}"}

        try:
            if self._client is not None:
                response = self._client.post(url, json=payload, timeout=10.0)
            else:
                response = httpx.post(url, json=payload, timeout=10.0)
        except httpx.RequestError as e:
            logger.error(f"WhatsApp gateway unavailable: {e}")
            raise NotificationError(self.channel.value, f"WhatsApp gateway unavailable: {e}")

        if not response.is_success:
            logger.error(f"WhatsApp gateway rejected OTP ({response.status_code}): {response.text}")
            raise NotificationError(self.channel.value, f"Failed to send OTP: {response.text}")

        logger.info(f"OTP sent by WhatsApp to {to}")


class OtpSenderFactory:
    """Returns the delivery strategy for a channel."""

    def __init__(self, email_sender: OtpSenderStrategy = None, whatsapp_sender: OtpSenderStrategy = None):
        self._senders = {
            OtpChannel.EMAIL: email_sender or OtpEmailSenderStrategy(),
            OtpChannel.WHATSAPP: whatsapp_sender or OtpWhatsAppSenderStrategy(),
        }

    def create(self, channel) -> OtpSenderStrategy:
        try:
            return self._senders[OtpChannel(channel)]
        except ValueError:
            raise ValidationAppError(f"Unsupported OTP channel: {channel}")


# ==========================================
# HOTEL ANNOUNCEMENTS
# ==========================================

class HotelObserver(ABC):
    @abstractmethod
    def send_hotel_announcement(self, db: Session, hotel) -> None:
        ...


class NotifyUsersEmailObserver(HotelObserver):
    """Emails every confirmed user about a newly opened hotel."""

    def send_hotel_announcement(self, db: Session, hotel) -> None:
        from repositories import UserRepository

        recipients = UserRepository(db).get_confirmed_emails()
        if not recipients:
            return

        subject = f"Exciting News! New Hotel Opened: {hotel.hotel_name}"
        body = (
            "<div style='font-family: Arial, sans-serif; color: #333;'>"
            f"<h2>We're Expanding!</h2>"
            f"<p>We are thrilled to announce the opening of <strong>{hotel.hotel_name}</strong> "
            f"located in <strong>{hotel.location}</strong>.</p>"
            f"<p>Best regards,<br><strong>{settings.sender_name}</strong></p>"
            "</div>"
        )
        # One message for everyone, recipients hidden from each other
        if send_email(settings.sender_email, subject, body, bcc=recipients):
            logger.info(f"Hotel announcement sent to {len(recipients)} users")


class HotelPublisher:
    """Subject side of the hotel announcement observer pair."""

    def __init__(self):
        self._observers: List[HotelObserver] = []

    def add_observer(self, observer: HotelObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: HotelObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify_observers(self, db: Session, hotel) -> None:
        # Announcement failures never fail the hotel creation
        for observer in self._observers:
            try:
                observer.send_hotel_announcement(db, hotel)
            except NotificationError as e:
                logger.error(f"Hotel announcement failed in {type(observer).__name__}: {e.message}")


hotel_publisher = HotelPublisher()
hotel_publisher.add_observer(NotifyUsersEmailObserver())
