import sys

from etf_pricer.main import main

sys.exit(main())
