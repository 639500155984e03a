"""
Notification service for sending emails.
Centralized SMTP handling for low stock alerts.
"""

import smtplib
import logging
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Dict, List, Optional

from config import get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Service for sending emails via SMTP.
    Configuration loaded from centralized config module.
    """

    def __init__(self):
        """Initialize email service with configuration from centralized config."""
        settings = get_settings()
        self.smtp_server = settings.smtp_server
        self.smtp_port = settings.smtp_port
        self.smtp_username = settings.smtp_username
        self.smtp_password = settings.smtp_password
        self.from_email = settings.email_from

    def is_configured(self) -> bool:
        """Check if email service is properly configured."""
        settings = get_settings()
        return settings.is_email_configured

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        plain_text: Optional[str] = None
    ) -> bool:
        """
        Send an HTML email.

        Args:
            to_email: Recipient email address
            subject: Email subject line
            html_content: HTML body content
            plain_text: Optional plain text fallback

        Returns:
            True if email sent successfully, False otherwise
        """
        if not self.is_configured():
            logger.error("Email service not configured. Missing credentials.")
            return False

        if not to_email:
            logger.error("Recipient email address is required.")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = self.from_email
            msg['To'] = to_email

            if plain_text:
                msg.attach(MIMEText(plain_text, 'plain'))
            msg.attach(MIMEText(html_content, 'html'))

            logger.info(f"Sending email to {to_email}")
            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email: {e}")
            return False

    def send_low_stock_alert(self, to_email: str, items: List[Dict]) -> bool:
        """
        Send one summary email listing every low stock product.

        Args:
            to_email: Recipient email address
            items: Dicts with 'name', 'sku', 'stock' and 'min_stock'
        """
        rows = "".join(
            f"<tr><td>{item['name']}</td><td>{item['sku']}</td>"
            f"<td>{item['stock']:g}</td><td>{item['min_stock']:g}</td></tr>"
            for item in items
        )
        html_content = f"""
        <html>
        <body>
            <h2>Low Stock Alert</h2>
            <p>{len(items)} product(s) are at or below their minimum stock.</p>
            <table border="1" cellpadding="10" cellspacing="0" style="border-collapse: collapse;">
                <tr><th>Product</th><th>SKU</th><th>Stock</th><th>Minimum</th></tr>
                {rows}
            </table>
            <p><em>Checked at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} by InventoryTracker.</em></p>
        </body>
        </html>
        """
        plain_text = "\n".join(
            f"{item['name']} ({item['sku']}): {item['stock']:g} / min {item['min_stock']:g}"
            for item in items
        )

        subject = f"Low Stock Alert: {len(items)} product(s) need restocking"
        return self.send_email(to_email, subject, html_content, plain_text=plain_text)
