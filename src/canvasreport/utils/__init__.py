from canvasreport.utils import logging

from canvasreport.utils.logging import (LOG_FORMAT, Logger,
                                        configure_logging,)

__all__ = ['LOG_FORMAT', 'Logger', 'configure_logging', 'logging']
