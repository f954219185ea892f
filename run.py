"""Development entry point:  python run.py  (or  flask --app run run)."""
import os

from app import create_app

app = create_app(os.environ.get("FLASK_CONFIG", "default"))

if __name__ == "__main__":
    # threaded so /events streams do not block other requests
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 8080)), threaded=True)
