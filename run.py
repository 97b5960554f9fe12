"""
Entry point for running the Check-in Tracker Flask application.

This module imports the application factory and starts the development
server when executed directly. In production a WSGI server such as
gunicorn should serve ``wsgi:app`` instead.
"""

from checkin_tracker import create_app, db

app = create_app()

if __name__ == "__main__":
    # Only create tables automatically in local development. Production
    # deployments manage the schema with Flask-Migrate.
    with app.app_context():
        db.create_all()
    app.run(host="0.0.0.0", port=5000, debug=True)
