import sys

from videofiles.cli import main

sys.exit(main())
