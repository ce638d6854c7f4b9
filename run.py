# -*- coding: utf-8 -*-

"""
Main entry point for launching the classification browser.

Usage: python run.py <input-json> <system-key>
"""

import sys

from classification_viewer.app import main

if __name__ == '__main__':
    sys.exit(main())
