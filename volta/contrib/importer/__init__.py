"""
Volta Importer - Bulk customer import from a CSV spreadsheet.

Usage:
    INSTALLED_APPS = [
        ...
        "volta",
        "volta.contrib.importer",
    ]

    from volta.contrib.importer import ImportService

    with open("clientes.csv", "rb") as f:
        result = ImportService.import_csv(business, f.read())
    result.as_json()
"""


def __getattr__(name):
    if name == "ImportService":
        from volta.contrib.importer.service import ImportService

        return ImportService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ImportService"]
