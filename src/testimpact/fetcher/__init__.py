from .change_detector import GitChangeDetector

__all__ = ['GitChangeDetector']
