"""Email utility - sends OTP emails via SMTP (TLS) or logs them in development."""
from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

logger = logging.getLogger(__name__)


def render_otp_email(app_name: str, otp: str, name: str, expire_minutes: int) -> tuple[str, str, str]:
    """Return (subject, html_body, plain_body) for an OTP message."""
    greeting = f"Hello {name}!" if name else "Hello!"
    subject = f"Your OTP for {app_name}"
    html_body = f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <style>
    body {{ font-family: Arial, sans-serif; background: #f9f9f9; margin: 0; padding: 0; }}
    .container {{ max-width: 600px; margin: 0 auto; background: #fff; }}
    .header {{ background: #007bff; color: #fff; padding: 20px; text-align: center; }}
    .content {{ padding: 20px; color: #666; font-size: 16px; }}
    .otp {{ background: #007bff; color: #fff; padding: 15px; text-align: center;
            margin: 20px 0; border-radius: 8px; font-size: 32px; letter-spacing: 5px; }}
    .footer {{ background: #333; color: #fff; padding: 15px; text-align: center; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1 style="margin: 0;">{app_name}</h1></div>
    <div class="content">
      <h2 style="color: #333;">{greeting}</h2>
      <p>Your OTP (One-Time Password) for {app_name} is:</p>
      <div class="otp">{otp}</div>
      <p>This OTP will expire in {expire_minutes} minutes.</p>
      <p>If you didn't request this OTP, please ignore this email.</p>
    </div>
    <div class="footer">&copy; {app_name}. All rights reserved.</div>
  </div>
</body>
</html>
"""
    plain_body = (
        f"{greeting}\n\nYour {app_name} verification code is: {otp}\n\n"
        f"Expires in {expire_minutes} minutes."
    )
    return subject, html_body, plain_body


class Mailer(ABC):
    """Sends the OTP message. Returns True on success, False on failure."""

    def __init__(self, app_name: str = "HD Notes", otp_expire_minutes: int = 10):
        self.app_name = app_name
        self.otp_expire_minutes = otp_expire_minutes

    @abstractmethod
    def send(self, to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
        """Deliver one message; backends report failure by returning False"""

    def send_otp_email(self, to: str, otp: str, name: str = "") -> bool:
        """Send a one-time code for email verification / sign-in."""
        subject, html_body, plain_body = render_otp_email(
            self.app_name, otp, name, self.otp_expire_minutes
        )
        return self.send(to, subject, html_body, plain_body)


class SMTPMailer(Mailer):
    """Transactional email over an authenticated SMTP TLS connection"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        app_name: str = "HD Notes",
        otp_expire_minutes: int = 10,
        timeout: int = 15,
    ):
        super().__init__(app_name=app_name, otp_expire_minutes=otp_expire_minutes)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.timeout = timeout

    def _build_smtp_connection(self) -> smtplib.SMTP:
        """Open an authenticated SMTP TLS connection."""
        conn = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        conn.ehlo()
        conn.starttls()
        conn.ehlo()
        if self.username:
            conn.login(self.username, self.password)
        return conn

    def send(self, to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.app_name} <{self.sender}>"
            msg["To"] = to

            if plain_body:
                msg.attach(MIMEText(plain_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with self._build_smtp_connection() as conn:
                conn.sendmail(self.sender, [to], msg.as_string())

            logger.info(f"[Email] Sent '{subject}' → {to}")
            return True

        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"[Email] Failed to send '{subject}' to {to}: {exc}")
            return False


class ConsoleMailer(Mailer):
    """Development backend: logs the message instead of sending it"""

    def send(self, to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
        logger.warning(f"[Email:console] To: {to} | Subject: {subject}\n{plain_body}")
        return True


def build_mailer(settings) -> Mailer:
    """Pick the mail backend named by EMAIL_BACKEND"""
    backend = settings.EMAIL_BACKEND.lower()
    if backend == "console":
        return ConsoleMailer(app_name=settings.APP_NAME, otp_expire_minutes=settings.OTP_EXPIRE_MINUTES)
    if backend == "smtp":
        return SMTPMailer(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            sender=settings.EMAIL_FROM,
            app_name=settings.APP_NAME,
            otp_expire_minutes=settings.OTP_EXPIRE_MINUTES,
        )
    raise ValueError(f"Unknown EMAIL_BACKEND: {settings.EMAIL_BACKEND}")
