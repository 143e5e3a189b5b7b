# src/htmlint/__main__.py
import sys

from htmlint.app import main

sys.exit(main())
