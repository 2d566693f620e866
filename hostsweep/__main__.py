import sys

from hostsweep.cli import main

sys.exit(main())
