# wsgi.py (at repo root)
from checkin_tracker import create_app

app = create_app()
