"""Script to parse recipe ingredient lines and optionally store them.

Reads one ingredient per line from a file (or stdin) and prints the parsed
records as JSON lines.

Run with: python scripts/parse_ingredients.py ingredients.txt
Store with: python scripts/parse_ingredients.py ingredients.txt --recipe-id lasagna
"""

import argparse
import sys

from sqlalchemy.orm import Session

from pantryplan.config import settings
from pantryplan.database import create_db_engine, init_db
from pantryplan.ingest.recipes import replace_recipe_ingredients
from pantryplan.logging_config import configure_logging, get_logger
from pantryplan.normalize.ingredients import parse_ingredient_lines

logger = get_logger(__name__)


def read_lines(path: str | None) -> list[str]:
    """Read ingredient lines from a file, or stdin when no path is given."""
    if path is None or path == "-":
        return sys.stdin.read().splitlines()
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def main():
    parser = argparse.ArgumentParser(description="Parse free-text recipe ingredient lines")
    parser.add_argument("path", nargs="?", help="File with one ingredient per line (default: stdin)")
    parser.add_argument("--recipe-id", "-r", type=str, help="Store the parsed lines for this recipe")
    parser.add_argument("--database-url", type=str, default=None, help="Override DATABASE_URL")
    args = parser.parse_args()

    configure_logging(log_level=settings.log_level)
    lines = read_lines(args.path)

    if args.recipe_id:
        engine = create_db_engine(args.database_url)
        init_db(engine)
        with Session(engine) as session:
            records = replace_recipe_ingredients(session, args.recipe_id, lines)
    else:
        records = parse_ingredient_lines(lines)

    for record in records:
        print(record.model_dump_json())


if __name__ == "__main__":
    main()
