#!/usr/bin/env python
"""Container healthcheck: exits 0 only when /readyz reports the database reachable."""

import json
import os
import sys
from urllib import request, error


def _readiness_url() -> str:
    host = os.getenv("HEALTHCHECK_HOST", "127.0.0.1")
    port = os.getenv("PORT", "3001")
    return f"http://{host}:{port}/readyz"


def main() -> int:
    target = _readiness_url()
    try:
        with request.urlopen(target, timeout=5) as resp:
            body = json.loads(resp.read() or b"{}")
    except error.HTTPError as exc:
        print(f"{target} answered {exc.code}", file=sys.stderr)
        return 1
    except (error.URLError, ValueError) as exc:
        print(f"{target} unreachable: {exc}", file=sys.stderr)
        return 1
    return 0 if body.get("status") == "ready" else 1


if __name__ == "__main__":
    sys.exit(main())
