"""Term Normalizer - Map JSON-LD policy terms to local names."""

from cxpolicy.core.normalizer.normalizer import NormalizerResult, TermNormalizer

__all__ = ["NormalizerResult", "TermNormalizer"]
