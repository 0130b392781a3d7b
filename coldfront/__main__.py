import sys

from coldfront.cli import main

sys.exit(main())
