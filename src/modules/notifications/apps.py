from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.notifications"
    label = "notifications"

    def ready(self) -> None:
        from modules.notifications import checks  # noqa: F401
        from modules.notifications.handlers import order_confirmation_handler
        from modules.orders.events import OrderCreated
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_confirmation_handler)
