import sys

from ridge_saw.cli import main

sys.exit(main())
