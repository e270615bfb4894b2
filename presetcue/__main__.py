import sys

from presetcue.app import main

sys.exit(main())
