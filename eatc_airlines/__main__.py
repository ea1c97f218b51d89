import sys

from eatc_airlines.cli import main

sys.exit(main())
