"""Optional Volta apps. Add each to INSTALLED_APPS as needed."""
