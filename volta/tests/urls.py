"""URLconf for Volta tests."""

from django.urls import include, path

urlpatterns = [
    path("api/", include("volta.urls")),
    path("api/wallet/", include("volta.contrib.wallet.urls")),
    path("api/ai/", include("volta.contrib.ai.urls")),
    path("api/lgpd/", include("volta.contrib.privacy.urls")),
    path("api/", include("volta.contrib.importer.urls")),
]
