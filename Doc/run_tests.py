#!/usr/bin/env python
"""
Test runner script for executing the full suite
Usage: python Doc/run_tests.py (same as python manage.py test)
"""
import os
import sys
from pathlib import Path

import django
from django.conf import settings
from django.test.utils import get_runner

if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'stockroom.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests([
        'stockroom.core',
        'stockroom.querylog',
        'stockroom.screens',
        'stockroom.orders',
        'stockroom.notifications',
        'stockroom.reports',
    ])
    sys.exit(bool(failures))
