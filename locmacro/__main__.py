import sys

from locmacro.run_all import main

sys.exit(main())
