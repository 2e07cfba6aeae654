from quill.decorators.metrics import timed

__all__ = ["timed"]
