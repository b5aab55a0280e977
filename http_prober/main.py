import logging
import sys
import traceback
from typing import List, Optional

from http_prober.libraries.logger import configure_logging
from http_prober.libraries.runtime_args import parse_args
from http_prober.core.errors import ConfigurationError, UnexpectedProbeError
from http_prober.core.probe_config import ProberConfig
from http_prober.core.probe_loop import ProbeLoop

log = logging.getLogger('core')

# same status a Go panic exits with
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        loop = ProbeLoop(ProberConfig(network=args.network))
    except ConfigurationError as e:
        log.critical(f'Invalid network {args.network!r}: {e}')
        return EXIT_FATAL

    try:
        loop.run()
    except UnexpectedProbeError as e:
        log.critical(e.describe())
        log.debug(traceback.format_exc())
        return EXIT_FATAL
    except KeyboardInterrupt:
        log.info(f'Interrupted after {loop.iterations} probes.')
        return EXIT_INTERRUPTED
    return 0


if __name__ == '__main__':
    sys.exit(main())
