"""System checks for the notifications app."""

from __future__ import annotations

from django.core.checks import Warning, register

from modules.notifications.transport import missing_smtp_settings


@register("notifications")
def smtp_settings_check(app_configs, **kwargs):
    missing = missing_smtp_settings()
    if not missing:
        return []
    return [
        Warning(
            "Order confirmation e-mails cannot be sent: SMTP settings are missing.",
            hint=f"Set {', '.join(missing)} in the environment.",
            id="notifications.W001",
        )
    ]
