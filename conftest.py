import os

import django

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dsp_test_project.settings')
django.setup()
