"""
Data Ingestion

Modules:
- paste_mode: Pasted text and table rows to match results
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "parse_results_text":
        from padel_app.ingestion.paste_mode import parse_results_text
        return parse_results_text
    if name == "results_from_records":
        from padel_app.ingestion.paste_mode import results_from_records
        return results_from_records
    if name == "collect_results":
        from padel_app.ingestion.paste_mode import collect_results
        return collect_results
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
