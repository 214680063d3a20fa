import asyncio
import logging
import smtplib
import uuid
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core.config import Settings, settings
from app.core.exceptions import NotificationError

logger = logging.getLogger(__name__)

SHARE_SUBJECT = "A document has been shared with you"


class EmailNotificationSender:
    """Отправка уведомлений о документах по email через SMTP"""

    def __init__(self, config: Settings):
        self.config = config

    def document_link(self, document_id: uuid.UUID) -> str:
        """Ссылка на документ во frontend"""
        return f"{self.config.frontend_url.rstrip('/')}/documents/{document_id}"

    def build_message(self, recipient_email: str, document_id: uuid.UUID) -> MIMEMultipart:
        """Формирование письма со ссылкой на документ"""
        link = self.document_link(document_id)

        msg = MIMEMultipart("alternative")
        msg["Subject"] = SHARE_SUBJECT
        msg["From"] = self.config.mail_from
        msg["To"] = recipient_email

        text = (
            "Hello,\n\n"
            "A document has been shared with you. Open it here:\n"
            f"{link}\n"
        )
        html = f"""
        <html>
        <body>
            <p>Hello,</p>
            <p>A document has been shared with you.</p>
            <p><a href="{link}">Open document</a></p>
        </body>
        </html>
        """
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        return msg

    async def send(self, recipient_email: str, document_id: uuid.UUID) -> None:
        """Отправка письма о предоставлении доступа к документу"""
        msg = self.build_message(recipient_email, document_id)

        if self.config.mail_log_only:
            logger.info(f"Mail log-only mode, share email for {document_id} to {recipient_email} not sent")
            return

        if not self.config.smtp_host:
            logger.error(f"SMTP is not configured, cannot send share email to {recipient_email}")
            raise NotificationError(error="SMTP is not configured")

        try:
            # smtplib блокирующий, выполняем в отдельном потоке
            await asyncio.to_thread(self._deliver, recipient_email, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send share email to {recipient_email}: {e}")
            raise NotificationError(error=str(e)) from e

        logger.info(f"Share email for document {document_id} sent to {recipient_email}")

    def _deliver(self, recipient_email: str, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=30) as server:
            if self.config.smtp_use_tls:
                server.starttls()
            if self.config.smtp_username:
                server.login(self.config.smtp_username, self.config.smtp_password)
            server.sendmail(self.config.mail_from, [recipient_email], msg.as_string())


def get_notification_sender() -> EmailNotificationSender:
    """Зависимость FastAPI для отправителя уведомлений"""
    return EmailNotificationSender(settings)
