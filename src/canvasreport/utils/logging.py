import logging
from dataclasses import dataclass, field

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Installs a stream handler on the ``canvasreport`` logger.

    Args:
        verbose (bool, optional): Log at DEBUG instead of WARNING. Defaults to False.

    Returns:
        logging.Logger: The package logger.
    """
    logger = logging.getLogger("canvasreport")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


@dataclass
class Logger:
    verbose: bool = False
    log: bool = True
    logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self):
        self.logger = logging.getLogger(__name__)

    def print_and_log(self, message, verbose=False, log=False, file=None):
        """
        Logs a message and optionally prints it.

        Args:
            message (str): The message to be logged and/or printed.
            verbose (bool, optional): Print even when the instance is not verbose.
            log (bool, optional): Log even when the instance has logging disabled.
            file (optional): Stream to print to. Defaults to stdout.
        """

        if self.verbose or verbose:
            print(message, file=file)

        if self.log or log:
            self.logger.info(message)
