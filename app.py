"""Development entry point: ``python app.py`` or ``flask --app app run``."""

import os

from access_directory.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))
