# manage.py
import sys

from app import create_app


def create_db():
    """Creates the database tables."""
    app = create_app()
    database = app.extensions['database']
    # create_app already ran create_all; repeat it so the command is explicit
    database.create_all()
    print(f"Database tables created at {database.engine.url.render_as_string(hide_password=True)}")


def drop_db():
    """Drops every table. Destroys all songs and playlists."""
    app = create_app()
    app.extensions['database'].drop_all()
    print("Database tables dropped!")


COMMANDS = {
    'create_db': create_db,
    'drop_db': drop_db,
}


if __name__ == '__main__':
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command in COMMANDS:
            COMMANDS[command]()
        else:
            print(f"Unknown command: {command}")
            print("Usage: python manage.py [create_db|drop_db]")
            sys.exit(1)
    else:
        print("No command provided. Usage: python manage.py [create_db|drop_db]")
        sys.exit(1)
