from .text_extraction import ITextExtractor

__all__ = ["ITextExtractor"]
