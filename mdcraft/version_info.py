__version__ = "1.2.0"
__build_timestamp__ = "2026-10-19 09:30:00"
__build_type__ = "source"
__description__ = "Markdown preview renderer, selection-aware editing engine and markdown generators"
