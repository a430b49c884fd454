"""Container healthcheck: exit 0 when the bot token works and the API answers."""
from __future__ import annotations

import sys

import requests

from libs.core.settings import get_settings


def main() -> None:
    settings = get_settings()
    token = settings.telegram_bot_token
    if not token:
        print("Missing TELEGRAM_BOT_TOKEN", file=sys.stderr)
        sys.exit(1)

    try:
        resp = requests.get(f"https://api.telegram.org/bot{token}/getMe", timeout=5)
        if not resp.ok:
            sys.exit(1)
        if settings.public_url:
            api = requests.get(f"{settings.public_url.rstrip('/')}/health", timeout=5)
            if not api.ok:
                sys.exit(1)
    except requests.RequestException as exc:  # pragma: no cover - network errors
        print(exc, file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
