from .prebuilt import PREBUILT_PERSONAS, prebuilt_profiles

__all__ = ["PREBUILT_PERSONAS", "prebuilt_profiles"]
