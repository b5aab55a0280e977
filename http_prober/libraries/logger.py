import logging
import sys

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y/%m/%d %H:%M:%S'


def configure_logging(loglevel: str = 'INFO') -> None:
    """
    Configure the root logger once per process. Logs go to stderr.
    """
    level = getattr(logging, str(loglevel).upper(), None)
    if not isinstance(level, int):
        raise ValueError(f'Invalid log level: {loglevel}')

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(stream)

    # urllib3 logs every new connection at debug
    logging.getLogger('urllib3').setLevel(logging.WARNING)
