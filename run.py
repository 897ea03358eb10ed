"""Grammable entry point, served by Gunicorn (``gunicorn run:app``).

Running this file directly execs Gunicorn bound to ``$HOST:$PORT``.
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

from app import create_app

app = create_app()


def gunicorn_command():
    bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '5054')}"
    # Kuzu allows one writing process per database file
    return ["gunicorn", "-w", "1", "-b", bind, "run:app"]


if __name__ == '__main__':
    command = gunicorn_command()
    print(f"🚀 Launching Gunicorn with command: {' '.join(command)}")
    try:
        os.execvp(command[0], command)
    except FileNotFoundError:
        print("Error: 'gunicorn' command not found.", file=sys.stderr)
        sys.exit(1)
