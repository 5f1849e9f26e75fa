"""Service for sending emails."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending verification codes via SMTP."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "ServiceHub",
        timeout_seconds: float = 10.0,
        code_ttl_seconds: int = 600,
    ):
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_email = from_email or ""
        self.from_name = from_name
        self.timeout_seconds = timeout_seconds
        self.code_ttl_seconds = code_ttl_seconds
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_verification_code(self, email: str, code: str) -> bool:
        """
        Send an email verification code.

        Args:
            email: Recipient email
            code: Six digit verification code

        Returns:
            True if sent successfully, False otherwise
        """
        minutes = max(1, self.code_ttl_seconds // 60)

        if not self.enabled:
            # Development mode: no SMTP server configured
            logger.info("Verification code for %s: %s (expires in %d minutes)", email, code, minutes)
            return True

        subject = "Verify your email address - ServiceHub"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <div style="background-color: #0f172a; padding: 30px; border-radius: 10px; text-align: center;">
                    <h1 style="color: #93c5fd; margin: 0;">ServiceHub</h1>
                </div>

                <div style="padding: 30px 0;">
                    <h2 style="color: #1e293b; margin-bottom: 20px;">Confirm your email</h2>

                    <p style="color: #475569; line-height: 1.6; margin-bottom: 20px;">
                        Enter the code below to finish creating your account:
                    </p>

                    <div style="text-align: center; margin: 30px 0;">
                        <span style="font-size: 32px; letter-spacing: 8px; font-weight: bold; color: #1e293b;">
                            {code}
                        </span>
                    </div>

                    <p style="color: #64748b; font-size: 14px; margin-top: 30px;">
                        If you did not create a ServiceHub account, you can ignore this email.
                    </p>

                    <p style="color: #64748b; font-size: 14px; margin-top: 20px;">
                        This code will expire in {minutes} minutes.
                    </p>
                </div>
            </body>
        </html>
        """

        text_body = f"""
        ServiceHub - Email verification

        Your verification code is: {code}

        This code will expire in {minutes} minutes.

        If you did not create a ServiceHub account, you can ignore this email.
        """

        return self._send_email(email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send an email via SMTP.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            part1 = MIMEText(text_body, "plain", "utf-8")
            part2 = MIMEText(html_body, "html", "utf-8")

            msg.attach(part1)
            msg.attach(part2)

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout_seconds) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to_email, exc)
            return False
