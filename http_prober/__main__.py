import sys

from http_prober.main import main

sys.exit(main())
