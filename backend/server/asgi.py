"""
ASGI entry point for the WhatsApp gateway.

Loads .env, then builds the app from AppConfig.load_from_env().
The lifespan opens the WhatsApp session once the server is up.

    uvicorn server.asgi:app --app-dir backend
"""

from dotenv import load_dotenv

load_dotenv()

from server.app import create_app  # pylint: disable=wrong-import-position

app = create_app()
