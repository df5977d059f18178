from functools import wraps

from loguru import logger


def log_errors(func):
    """Log the failing call with its qualified name and re-raise."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            # bind() keeps braces in the error text out of message formatting
            logger.bind(operation=func.__qualname__, error_type=type(e).__name__).error(
                f"Error in {func.__qualname__}: {e}"
            )
            raise

    return wrapper
