"""Account URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.accounts.views import DefaultAddressView

urlpatterns = [
    path("account/address/", DefaultAddressView.as_view(), name="account-address"),
]
