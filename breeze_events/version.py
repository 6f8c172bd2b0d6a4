# version.py
# Single source of truth for version strings
# Import this everywhere instead of hardcoding versions

BREEZE_EVENTS_VERSION = "1.0.0"


def get_version_string() -> str:
    """Returns a formatted version string for logging/display"""
    return f"breeze-events v{BREEZE_EVENTS_VERSION}"
