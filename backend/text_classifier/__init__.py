"""Text Classifier API: free-form text to zip/brand/category/time_pref via an LLM."""

__version__ = "1.0.0"
