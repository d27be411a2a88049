"""SMTP transport for outbound e-mail.

Configuration comes from the ``SMTP_*`` settings; if any of them is
missing ``SmtpEmailTransport.from_settings`` raises ``ConfigurationMissing``
naming every absent value.  Port 465 uses implicit TLS, any other port
upgrades with STARTTLS.

``send`` never raises for delivery problems.  It returns a
``DeliveryResult`` whose ``error`` is one of ``ERROR_CODES``.
"""

from __future__ import annotations

import smtplib
import socket
from dataclasses import dataclass
from typing import Any, List, Optional

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection

from modules.core.exceptions import ConfigurationMissing

logger = structlog.get_logger(__name__)

REQUIRED_SETTINGS = ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "SMTP_FROM_EMAIL")
IMPLICIT_TLS_PORT = 465

ERROR_CODES = {
    "envelope": "The recipient or sender address was rejected.",
    "auth": "Authentication with the mail server failed.",
    "connection_refused": "The mail server refused the connection.",
    "timeout": "The mail server did not respond in time.",
    "smtp": "The mail server returned an error.",
}


def missing_smtp_settings(source: Any = None) -> List[str]:
    source = source or settings
    return [name for name in REQUIRED_SETTINGS if not str(getattr(source, name, "") or "").strip()]


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    username: str
    password: str
    from_email: str
    timeout: int = 10

    @property
    def use_ssl(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT

    @classmethod
    def from_settings(cls, source: Any = None) -> SmtpConfig:
        """Read the ``SMTP_*`` settings.

        Raises:
            ConfigurationMissing: a required value is absent or the port is
                not a number.
        """
        source = source or settings
        missing = missing_smtp_settings(source)
        if missing:
            raise ConfigurationMissing(missing)
        try:
            port = int(source.SMTP_PORT)
        except (TypeError, ValueError):
            raise ConfigurationMissing(
                ["SMTP_PORT"], "SMTP_PORT must be an integer."
            ) from None
        return cls(
            host=source.SMTP_HOST,
            port=port,
            username=source.SMTP_USER,
            password=source.SMTP_PASS,
            from_email=source.SMTP_FROM_EMAIL,
            timeout=getattr(source, "SMTP_TIMEOUT", 10),
        )

    def __repr__(self) -> str:
        return (
            f"SmtpConfig(host={self.host!r}, port={self.port}, "
            f"username={self.username!r}, password='***')"
        )


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    error: Optional[str] = None
    detail: str = ""

    @classmethod
    def failed(cls, code: str, detail: str = "") -> DeliveryResult:
        return cls(success=False, error=code, detail=detail or ERROR_CODES[code])


def classify_smtp_error(exc: BaseException) -> str:
    if isinstance(exc, (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused)):
        return "envelope"
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return "auth"
    if isinstance(exc, ConnectionRefusedError):
        return "connection_refused"
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return "timeout"
    return "smtp"


class SmtpEmailTransport:
    """Sends e-mail through Django's mail framework with explicit SMTP config.

    ``backend`` defaults to ``settings.EMAIL_BACKEND`` so tests run against
    the locmem backend.
    """

    def __init__(self, config: SmtpConfig, backend: Optional[str] = None) -> None:
        self.config = config
        self._backend = backend

    @classmethod
    def from_settings(cls, source: Any = None) -> SmtpEmailTransport:
        return cls(SmtpConfig.from_settings(source))

    def _connection(self):
        return get_connection(
            backend=self._backend,
            host=self.config.host,
            port=self.config.port,
            username=self.config.username,
            password=self.config.password,
            use_ssl=self.config.use_ssl,
            use_tls=not self.config.use_ssl,
            timeout=self.config.timeout,
        )

    def send(self, to: str, subject: str, html_body: str, text_body: str = "") -> DeliveryResult:
        log = logger.bind(host=self.config.host, port=self.config.port)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body or html_body,
            from_email=self.config.from_email,
            to=[to],
            connection=self._connection(),
        )
        message.attach_alternative(html_body, "text/html")
        try:
            sent = message.send()
        except (smtplib.SMTPException, OSError) as exc:
            code = classify_smtp_error(exc)
            log.error("email.delivery_failed", error=code, detail=str(exc))
            return DeliveryResult.failed(code)
        if not sent:
            log.error("email.delivery_failed", error="smtp", detail="no message accepted")
            return DeliveryResult.failed("smtp")
        log.info("email.sent", subject=subject)
        return DeliveryResult(success=True)
