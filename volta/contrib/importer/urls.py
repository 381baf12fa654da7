from django.urls import path

from .views import ImportCustomersView, ImportTemplateView

app_name = "volta_importer"

urlpatterns = [
    path("customers/import/", ImportCustomersView.as_view(), name="import"),
    path("template/", ImportTemplateView.as_view(), name="template"),
]
