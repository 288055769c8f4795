"""Write the local ``.env`` used by the studio and create the database tables."""
from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path
from typing import Dict

from dotenv import dotenv_values, load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

DEFAULT_ENV_PATH = REPO_ROOT / ".env"
BACKUP_SUFFIX = ".bak"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create or update the .env file for local development and initialize the database."
    )
    parser.add_argument("--flask-app", default="wsgi.py", help="Entry point used by Flask (default: wsgi.py)")
    parser.add_argument(
        "--secret-key",
        help="Secret key for Flask sessions. If omitted, the current value in .env is preserved.",
    )
    parser.add_argument("--llm-api-key", help="API key for the AI gateway.")
    parser.add_argument("--llm-api-base", help="Base URL of the OpenAI-compatible gateway (optional).")
    parser.add_argument("--llm-model", help="Model name sent with every completion call (optional).")
    parser.add_argument("--database-url", help="Override DATABASE_URL (optional).")
    parser.add_argument(
        "--env-path",
        type=Path,
        default=DEFAULT_ENV_PATH,
        help="Path to the .env file that should be created/updated.",
    )
    parser.add_argument(
        "--skip-db",
        action="store_true",
        help="Only update the .env file without touching the database.",
    )
    return parser.parse_args(argv)


def read_env(path: Path) -> Dict[str, str]:
    if not path.exists():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def write_env(path: Path, values: Dict[str, str]) -> None:
    if path.exists():
        backup_path = path.with_suffix(path.suffix + BACKUP_SUFFIX)
        shutil.copy(path, backup_path)
        print(f"Existing {path.name} backed up to {backup_path.name}.")
    lines = [f"{key}={value}" for key, value in values.items()]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Environment written to {path}.")


def update_env_file(args: argparse.Namespace) -> Dict[str, str]:
    env_data = read_env(args.env_path)
    env_data["FLASK_APP"] = args.flask_app

    optional = {
        "SECRET_KEY": args.secret_key,
        "LLM_API_KEY": args.llm_api_key,
        "LLM_API_BASE": args.llm_api_base,
        "LLM_MODEL": args.llm_model,
        "DATABASE_URL": args.database_url,
    }
    env_data.update({key: value for key, value in optional.items() if value})

    write_env(args.env_path, env_data)
    return env_data


def initialize_database(env_path: Path) -> None:
    # Config reads the environment at import, so the fresh values go in first.
    load_dotenv(env_path, override=True)
    from webnovel_studio import create_app
    from webnovel_studio.extensions import db

    app = create_app()
    with app.app_context():
        db.create_all()
    print(f"Database initialized ({app.config['SQLALCHEMY_DATABASE_URI']}).")


def main(argv=None) -> None:
    args = parse_args(argv)
    env_values = update_env_file(args)

    if not args.skip_db:
        initialize_database(args.env_path)
    else:
        print("Database initialization skipped.")

    print("\nSetup complete! Summary:")
    for key in sorted(env_values):
        value = env_values[key]
        if key in {"SECRET_KEY", "LLM_API_KEY"} and value:
            value = value[:4] + "…"
        print(f"  {key}={value}")


if __name__ == "__main__":
    main()
