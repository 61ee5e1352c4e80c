from .preferences_repo import PreferencesRepo

__all__ = ["PreferencesRepo"]
