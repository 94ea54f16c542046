"""
SimpleAuthWeb: demo FastAPI front end with OAuth2 (authorization-code) sign-in.

Decisions:
- .env is loaded before importing simple_auth_web so OAUTH2_* and SESSION_KEY
  are available when the app is created (Ruff E402 suppressed for that).
- Exactly one provider is active, chosen by OAUTH2_PROVIDER (google, microsoft
  or oidc). A bad provider configuration aborts startup with ConfigError.
- Session secret from SESSION_KEY; default "change-me" is for dev only.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

from simple_auth_web import create_app  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    logging.getLogger(__name__).info("SimpleAuthWeb: listening on port %s", port)
    uvicorn.run(app, host="0.0.0.0", port=port)
