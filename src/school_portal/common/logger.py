'''
universal logger
'''
import logging
import sys

from .config import settings

def setup_logger(name: str = 'school-portal') -> logging.Logger:
    """
    Configures and returns the shared application logger.
    Level comes from LOG_LEVEL; TEST_MODE forces DEBUG so pytest -s shows everything.
    """
    logger = logging.getLogger(name)
    level = logging.DEBUG if settings.TEST_MODE else settings.LOG_LEVEL.upper()
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(module)s - %(levelname)s\n - %(message)s'
        ))
        logger.addHandler(handler)

    return logger

# Single logger instance imported by every module
log = setup_logger()
