import sys

from automute.cli import main

sys.exit(main())
