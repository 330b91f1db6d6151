import sys

from calibcheck.cli import main

sys.exit(main())
