import sys

from roomgen.cli import main

sys.exit(main())
