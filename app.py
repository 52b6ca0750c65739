"""Main entry point for the application."""

import os

from viralviews import create_app

app = create_app()


if __name__ == "__main__":
    app.run(
        debug=app.config["APP_ENV"] != "production",
        host="0.0.0.0",  # nosec
        port=int(os.environ.get("PORT", 8080)),
    )
