"""
Volta URL configuration.

Include in your project's urls.py:

    path("api/", include("volta.urls")),
"""

from django.urls import path

from volta import views

app_name = "volta"

urlpatterns = [
    path("stamps/add/", views.AddStampsView.as_view(), name="stamps-add"),
    path("stamps/history/", views.StampHistoryView.as_view(), name="stamps-history"),
    path("stamps/reset/", views.ResetEnrollmentView.as_view(), name="stamps-reset"),
    path("customers/assign-card/", views.AssignCardView.as_view(), name="assign-card"),
    path("enroll/", views.EnrollView.as_view(), name="enroll"),
]
