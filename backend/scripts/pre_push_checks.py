#!/usr/bin/env python3
"""
Pre-push / production readiness checks.
Run from backend dir with project venv active: python scripts/pre_push_checks.py
"""
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def check_imports():
    from alumni_connect.main import app  # noqa: F401
    from alumni_connect.services.ranking import get_ranking_strategy
    get_ranking_strategy()
    return "imports"


def check_routes():
    from alumni_connect.main import app
    paths = {getattr(r, "path", "") for r in app.routes}
    for required in ("/auth/login", "/connections/request", "/mentors/{mentor_id}/request", "/notifications"):
        assert required in paths, f"missing route {required}"
    # static mentor paths must be matched before /mentors/{mentor_id}
    ordered = [getattr(r, "path", "") for r in app.routes]
    assert ordered.index("/mentors/me") < ordered.index("/mentors/{mentor_id}")
    return "routes"


def check_secret_key():
    from alumni_connect.config import settings, DEFAULT_SECRET_KEY
    if settings.is_production:
        assert settings.secret_key != DEFAULT_SECRET_KEY, "SECRET_KEY must be set in production"
    return "secret_key"


def check_init_db():
    from alumni_connect.database import init_db
    init_db()
    return "init_db"


def main():
    checks = [check_imports, check_routes, check_secret_key, check_init_db]
    for fn in checks:
        try:
            name = fn()
            print(f"OK {name}")
        except Exception as e:
            print(f"FAIL {fn.__name__}: {e}")
            return 1
    print("All pre-push checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
