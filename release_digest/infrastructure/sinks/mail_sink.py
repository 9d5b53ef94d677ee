import asyncio
import smtplib
from email.mime.text import MIMEText

from release_digest.application.ports import DigestSinkPort
from release_digest.config.logger_config import logger
from release_digest.config.settings import AppSettings
from release_digest.domain.errors import DigestDeliveryError

MAIL_SUBJECT = "New GitHub Releases"


class SmtpDigestSink(DigestSinkPort):
    def __init__(
        self,
        host: str,
        port: int,
        mail_from: str,
        mail_to: str,
        username: str = "",
        password: str = "",
        use_ssl: bool = False,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.mail_from = mail_from
        self.mail_to = mail_to
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "SmtpDigestSink":
        return cls(
            host=settings.mail_host,
            port=settings.mail_port,
            mail_from=settings.mail_from,
            mail_to=settings.mail_to,
            username=settings.mail_username,
            password=settings.mail_password,
            use_ssl=settings.mail_ssl,
        )

    async def deliver(self, document: str, page_number: int, page_count: int) -> None:
        if not self.host or not self.mail_from or not self.mail_to:
            raise DigestDeliveryError("mail_host, mail_from and mail_to must be configured")
        message = self.build_message(document, page_number, page_count)
        await asyncio.to_thread(self._send, message)
        logger.info("Mail sent: page {}/{} to {}", page_number, page_count, self.mail_to)

    def build_message(self, document: str, page_number: int, page_count: int) -> MIMEText:
        subject = MAIL_SUBJECT if page_count <= 1 else f"{MAIL_SUBJECT} ({page_number}/{page_count})"
        message = MIMEText(document, "html", "utf-8")
        message["Subject"] = subject
        message["From"] = self.mail_from
        message["To"] = self.mail_to
        return message

    def _send(self, message: MIMEText) -> None:
        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout_seconds)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds)
            with server:
                if not self.use_ssl:
                    # STARTTLS only when the server advertises it.
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls()
                        server.ehlo()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise DigestDeliveryError(f"SMTP delivery to {self.host}:{self.port} failed: {exc}") from exc
