"""
Volta AI - Campaign copy and customer insights from an LLM.

Every generation degrades to canned Portuguese content when the model is
unconfigured, unreachable, or replies with something unparseable; callers
can tell the two apart through ``result.is_fallback``.

Usage:
    INSTALLED_APPS = [
        ...
        "volta",
        "volta.contrib.ai",
    ]

    from volta.contrib.ai import AIService

    result = AIService.generate_campaign(context, "reativacao", "Clientes inativos")
    result.value.message
"""


def __getattr__(name):
    if name == "AIService":
        from volta.contrib.ai.service import AIService

        return AIService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["AIService"]
