"""
Import endpoints.

    POST customers/import/   multipart, field "file" (CSV)
    GET  template/           CSV template download
"""

from __future__ import annotations

import logging

from django.http import HttpResponse, JsonResponse

from volta.contrib.importer.service import ImportService
from volta.exceptions import VoltaError
from volta.views import BusinessView

logger = logging.getLogger("volta.importer")


class ImportCustomersView(BusinessView):
    logger = logger

    def post(self, request):
        business = self.get_business()
        upload = request.FILES.get("file")
        if upload is None:
            raise VoltaError("INVALID_REQUEST", message="No file provided")
        if not upload.name.lower().endswith(".csv"):
            raise VoltaError("INVALID_REQUEST", message="Invalid file type. Please upload a CSV file")

        result = ImportService.import_csv(business, upload.read(), created_by=self.get_actor())
        return JsonResponse(result.as_json())


class ImportTemplateView(BusinessView):
    logger = logger

    def get(self, request):
        business = self.get_business()
        response = HttpResponse(
            ImportService.template_csv(business),
            content_type="text/csv; charset=utf-8",
        )
        response["Content-Disposition"] = 'attachment; filename="template-importacao-clientes.csv"'
        return response
