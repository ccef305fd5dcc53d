import sys

from .feature_extraction.main import main

sys.exit(main())
