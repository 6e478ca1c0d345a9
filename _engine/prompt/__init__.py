from .builder import build_prompt, render_unified_diff
from .method_summary import DEFAULT_EXTRACTORS, build_method_summary

__all__ = ["build_prompt", "render_unified_diff", "DEFAULT_EXTRACTORS", "build_method_summary"]
