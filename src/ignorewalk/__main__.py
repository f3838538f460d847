import sys

from ignorewalk.cli import main

sys.exit(main())
