"""Tree-test study service: study storage, result recording and session auth."""

__version__ = "0.1.0"
