from django.urls import path

from .views import WalletDataView

app_name = "volta_privacy"

urlpatterns = [
    path("wallet-data/", WalletDataView.as_view(), name="wallet-data"),
]
