from django.urls import path

from .views import CampaignView, InsightsView

app_name = "volta_ai"

urlpatterns = [
    path("campaign/", CampaignView.as_view(), name="campaign"),
    path("insights/", InsightsView.as_view(), name="insights"),
]
