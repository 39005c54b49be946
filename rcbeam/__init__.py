"""
pyrcbeam - reinforced concrete beam section design to Eurocode 2.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
