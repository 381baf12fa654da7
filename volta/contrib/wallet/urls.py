from django.urls import path

from .views import (
    CreatePassView,
    DeletePassView,
    PassPreviewView,
    RetryQueueView,
    UpdatePassView,
)

app_name = "volta_wallet"

urlpatterns = [
    path("create-pass/", CreatePassView.as_view(), name="create-pass"),
    path("update-pass/", UpdatePassView.as_view(), name="update-pass"),
    path("delete-pass/", DeletePassView.as_view(), name="delete-pass"),
    path("retry-queue/", RetryQueueView.as_view(), name="retry-queue"),
    path("pass/<uuid:customer_card_id>/", PassPreviewView.as_view(), name="pass-preview"),
]
