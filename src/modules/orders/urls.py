"""Order URL configuration.

The catalog router already serves the browsable API root under
``/api/v1/``, so orders only registers its own routes.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
