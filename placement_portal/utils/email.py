import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
import os
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from placement_portal.services.ports import Notifier

logger = logging.getLogger(__name__)

# Thread pool for async email sending
executor = ThreadPoolExecutor(max_workers=3)

PORTAL_NAME = "College Job Portal"

# SMTP Configuration for different providers
SMTP_CONFIGS = {
    'gmail': {'host': 'smtp.gmail.com', 'port': 587, 'use_tls': True},
    'outlook': {'host': 'smtp-mail.outlook.com', 'port': 587, 'use_tls': True},
    'yahoo': {'host': 'smtp.mail.yahoo.com', 'port': 587, 'use_tls': True},
    'office365': {'host': 'smtp.office365.com', 'port': 587, 'use_tls': True},
}


def detect_email_provider(email_address):
    """Auto-detect email provider from email address"""
    email_lower = email_address.lower()
    if '@gmail.com' in email_lower:
        return 'gmail'
    elif '@outlook.com' in email_lower or '@hotmail.com' in email_lower:
        return 'outlook'
    elif '@yahoo.com' in email_lower:
        return 'yahoo'
    else:
        return 'custom'


def get_smtp_config():
    """Get SMTP configuration based on provider"""
    provider = os.getenv('MAIL_PROVIDER', 'auto').lower()
    sender_email = os.getenv('MAIL_USERNAME', '')

    if provider == 'auto':
        provider = detect_email_provider(sender_email)

    if provider in SMTP_CONFIGS:
        return SMTP_CONFIGS[provider]
    return {
        'host': os.getenv('SMTP_HOST', 'smtp.example.com'),
        'port': int(os.getenv('SMTP_PORT', 587)),
        'use_tls': True
    }


def _wrap(title, body):
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #800000;">{title}</h2>
    {body}
    <br/>
    <p>Best regards,<br/>{PORTAL_NAME} Team</p>
</div>
"""


def _status_blurb(status):
    if status == "shortlisted":
        return "<p>Congratulations! You've been shortlisted. The company will contact you soon.</p>"
    if status == "hired":
        return "<p>Congratulations! You've been selected for the position!</p>"
    if status == "rejected":
        return "<p>Thank you for your interest. We encourage you to apply for other opportunities.</p>"
    return ""


def welcome_template(data):
    return (
        f"Welcome to {PORTAL_NAME}",
        _wrap(f"Welcome to {PORTAL_NAME}!", f"""
    <p>Hello {data['name']},</p>
    <p>Your {data['role']} account has been successfully created.</p>
    <p>You can now log in and start using the platform.</p>""")
    )


def application_status_change_template(data):
    status = data['status']
    return (
        f"Application Status Update - {data['job_title']}",
        _wrap("Application Status Update", f"""
    <p>Hello {data['student_name']},</p>
    <p>Your application status for <strong>{data['job_title']}</strong> at <strong>{data['company_name']}</strong> has been updated.</p>
    <p style="padding: 15px; background-color: #f5f5f5; border-left: 4px solid #800000;">
        <strong>New Status:</strong> {status.upper()}
    </p>
    {_status_blurb(status)}
    <p>Log in to your dashboard to view more details.</p>""")
    )


def new_application_template(data):
    return (
        f"New Application Received - {data['job_title']}",
        _wrap("New Application Received", f"""
    <p>Hello {data['company_name']},</p>
    <p>You have received a new application for the position: <strong>{data['job_title']}</strong></p>
    <p><strong>Candidate:</strong> {data['student_name']}</p>
    <p>Log in to your dashboard to review the application and candidate profile.</p>""")
    )


def job_posted_template(data):
    return (
        f"New Job Opportunity - {data['job_title']}",
        _wrap("New Job Opportunity Matching Your Profile", f"""
    <p>Hello {data['student_name']},</p>
    <p>A new job opportunity has been posted that matches your profile:</p>
    <div style="padding: 15px; background-color: #f5f5f5; border-left: 4px solid #800000; margin: 20px 0;">
        <p><strong>Position:</strong> {data['job_title']}</p>
        <p><strong>Company:</strong> {data['company_name']}</p>
        <p><strong>Location:</strong> {data['location']}</p>
    </div>
    <p>Log in to your dashboard to view full details and apply.</p>""")
    )


def password_reset_template(data):
    minutes = data.get('expires_in_minutes', 10)
    return (
        "Password Reset Request",
        _wrap("Password Reset Request", f"""
    <p>Hello {data['name']},</p>
    <p>We received a request to reset your password. Click the link below to reset it:</p>
    <p style="margin: 20px 0;">
        <a href="{data['reset_url']}"
           style="background-color: #800000; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; display: inline-block;">
            Reset Password
        </a>
    </p>
    <p style="color: #666;">This link will expire in {minutes} minutes.</p>
    <p>If you didn't request this, please ignore this email.</p>""")
    )


def email_verification_template(data):
    return (
        "Verify your email address",
        _wrap("Verify Your Email", f"""
    <p>Hello {data['name']},</p>
    <p>Thanks for registering. Please confirm your email address:</p>
    <p style="margin: 20px 0;">
        <a href="{data['verification_url']}"
           style="background-color: #800000; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; display: inline-block;">
            Verify Email
        </a>
    </p>
    <p style="color: #666;">This link will expire in 24 hours.</p>""")
    )


TEMPLATES = {
    "welcome": welcome_template,
    "application_status_change": application_status_change_template,
    "new_application": new_application_template,
    "job_posted": job_posted_template,
    "password_reset": password_reset_template,
    "email_verification": email_verification_template,
}


def render_template(template_kind, template_data):
    """Return (subject, html) for a template kind."""
    if template_kind not in TEMPLATES:
        raise ValueError(f"Unknown email template: {template_kind}")
    return TEMPLATES[template_kind](template_data)


def send_email_sync(to_email, subject, html_content, text_content=None):
    """Send email via SMTP"""
    sender_email = os.getenv('MAIL_USERNAME')
    sender_password = os.getenv('MAIL_PASSWORD')
    sender_name = os.getenv('MAIL_FROM_NAME', PORTAL_NAME)

    if not sender_email or not sender_password:
        logger.warning(f"Email credentials not configured; not sending '{subject}' to {to_email}")
        return False

    smtp_config = get_smtp_config()

    # Create message
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = f"{sender_name} <{sender_email}>"
    message["To"] = to_email

    if text_content:
        message.attach(MIMEText(text_content, "plain"))
    message.attach(MIMEText(html_content, "html"))

    try:
        with smtplib.SMTP(smtp_config['host'], smtp_config['port']) as server:
            server.ehlo()
            if smtp_config['use_tls']:
                server.starttls()
                server.ehlo()

            server.login(sender_email, sender_password)
            server.send_message(message)

        logger.info(f"Email sent to {to_email}: {subject}")
        return True

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email to {to_email} failed: {e}")
        return False


async def send_template_email(to_email, template_kind, template_data):
    """Render and send a template, waiting for the SMTP round trip."""
    subject, html_content = render_template(template_kind, template_data)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, send_email_sync, to_email, subject, html_content)


class EmailNotifier(Notifier):
    """Fire-and-forget email dispatch; failures are logged, never raised."""

    def __init__(self, sender=send_email_sync):
        self._sender = sender
        self._pending = set()

    def notify(self, recipient, template_kind, template_data):
        try:
            subject, html_content = render_template(template_kind, template_data)
        except (KeyError, ValueError) as e:
            logger.error(f"Could not render '{template_kind}' email for {recipient}: {e}")
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no event loop (scripts): hand straight to the pool
            executor.submit(self._send, recipient, subject, html_content)
            return

        task = loop.create_task(self._dispatch(recipient, subject, html_content))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _dispatch(self, recipient, subject, html_content):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(executor, self._send, recipient, subject, html_content)

    def _send(self, recipient, subject, html_content):
        try:
            if not self._sender(recipient, subject, html_content):
                logger.warning(f"Notification '{subject}' to {recipient} was not delivered")
        except Exception:
            logger.exception(f"Notification '{subject}' to {recipient} failed")


def get_notifier():
    """FastAPI dependency returning the process-wide notifier."""
    return _notifier


_notifier = EmailNotifier()
