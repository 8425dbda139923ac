"""
Email Service

Sends transactional email over SMTP (aiosmtplib) with bodies rendered from
Jinja2 templates. Delivery failures are logged and reported as False; they
never propagate to the request that triggered them.
"""
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.template_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.SMTP_HOST and settings.FROM_EMAIL)

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        context = {"site_name": settings.FROM_NAME, "currency": settings.CURRENCY, **context}
        return self.template_env.get_template(f"{template_name}.html").render(**context)

    async def send_email(self, to_email: str, subject: str, html_content: str) -> bool:
        """
        Send an HTML email

        Returns:
            True when the SMTP server accepted the message
        """
        if not self.is_configured():
            logger.info(f"Email disabled (SMTP_HOST not set); skipping '{subject}' to {to_email}")
            return False

        message = MIMEMultipart("alternative")
        message["From"] = f"{settings.FROM_NAME} <{settings.FROM_EMAIL}>"
        message["To"] = to_email
        message["Subject"] = subject
        message.attach(MIMEText(html_content, "html", "utf-8"))

        try:
            async with aiosmtplib.SMTP(
                hostname=settings.SMTP_HOST,
                port=settings.SMTP_PORT,
                start_tls=settings.SMTP_USE_TLS,
            ) as smtp:
                if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                    await smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
                await smtp.send_message(message)

            logger.info(f"Email sent to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}", exc_info=True)
            return False

    async def send_template(self, to_email: str, subject: str, template_name: str, context: Dict[str, Any]) -> bool:
        try:
            html = self.render(template_name, context)
        except Exception as e:
            logger.error(f"Failed to render email template {template_name}: {e}", exc_info=True)
            return False
        return await self.send_email(to_email, subject, html)


email_service = EmailService()


# ============================================================================
# Transactional messages
# ============================================================================

def _order_lines(items: Iterable[dict]) -> list:
    return [
        {
            "name": item.get("name"),
            "quantity": item.get("quantity"),
            "price": item.get("price"),
            "size": item.get("size"),
            "color": item.get("color"),
        }
        for item in items
    ]


async def send_order_confirmation(order: dict, customer_name: str, customer_email: str) -> bool:
    return await email_service.send_template(
        customer_email,
        f"Order Confirmed - {order['order_number']}",
        "order_confirmation",
        {"order": order, "items": _order_lines(order.get("lines", [])), "customer_name": customer_name},
    )


async def send_admin_new_order(order: dict, customer_name: str, customer_email: str) -> bool:
    if not settings.ADMIN_NOTIFICATION_EMAIL:
        return False
    return await email_service.send_template(
        settings.ADMIN_NOTIFICATION_EMAIL,
        f"New Order {order['order_number']}",
        "admin_new_order",
        {
            "order": order,
            "items": _order_lines(order.get("lines", [])),
            "customer_name": customer_name,
            "customer_email": customer_email,
        },
    )


async def send_order_status_update(order_number: str, status: str, customer_name: str, customer_email: str) -> bool:
    return await email_service.send_template(
        customer_email,
        f"Order {order_number} is now {status.title()}",
        "order_status",
        {"order_number": order_number, "status": status, "customer_name": customer_name},
    )


async def send_password_reset(email: str, name: Optional[str], reset_url: str) -> bool:
    return await email_service.send_template(
        email,
        "Reset your password",
        "password_reset",
        {
            "name": name or "there",
            "reset_url": reset_url,
            "ttl_minutes": settings.RESET_TOKEN_TTL_MINUTES,
        },
    )


async def send_salesman_welcome(email: str, name: str, password: str) -> bool:
    return await email_service.send_template(
        email,
        f"Welcome to {settings.FROM_NAME}",
        "salesman_welcome",
        {"name": name, "email": email, "password": password, "login_url": f"{settings.APP_URL}/login"},
    )
