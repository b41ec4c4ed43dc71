"""
提示词管理模块
"""

from .loader import PromptLoader, PromptLoadError, PromptRenderError, prompt_loader

__all__ = ["PromptLoader", "PromptLoadError", "PromptRenderError", "prompt_loader"]
