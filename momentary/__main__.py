import sys

from momentary.main import main

sys.exit(main())
