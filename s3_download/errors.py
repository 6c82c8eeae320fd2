from __future__ import annotations
import logging
import functools
from typing import Type, Callable, Any

class S3DownloadToolError(Exception): pass
class ConfigurationError(S3DownloadToolError): pass
class BucketNotFoundError(S3DownloadToolError): pass
class S3DownloadError(S3DownloadToolError): pass

def setup_logging(level: int = logging.INFO, logfile: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):  # avoid duplicate handlers
        root.removeHandler(h)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    root.addHandler(stream)
    if logfile:
        fh = logging.FileHandler(logfile)
        fh.setFormatter(fmt)
        root.addHandler(fh)

def log_and_reraise(exception_cls: Type[Exception] = S3DownloadError):
    """
    Log any failure of the wrapped call and re-raise it as `exception_cls`.
    Errors that already belong to the package hierarchy pass through untouched.
    """
    def deco(func: Callable[..., Any]):
        @functools.wraps(func)
        def wrapper(*a, **kw):
            try:
                return func(*a, **kw)
            except S3DownloadToolError:
                raise
            except Exception as e:
                logging.getLogger(func.__module__).error("%s failed: %s", func.__name__, e)
                raise exception_cls(f"{func.__name__} failed: {e}") from e
        return wrapper
    return deco
