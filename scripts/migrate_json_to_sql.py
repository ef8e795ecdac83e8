"""One-off migration script: JSON documents (enrollments.json, contact.json) -> SQL store."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Make the course_api package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from course_api.core.config import get_settings  # noqa: E402
from course_api.core.logging import configure_logging  # noqa: E402
from course_api.repositories.json_storage import JsonRecordStore  # noqa: E402
from course_api.repositories.sql_repository import SQLRecordStore  # noqa: E402

logger = logging.getLogger("migrate_json_to_sql")


def migrate(source: JsonRecordStore, target: SQLRecordStore) -> tuple[int, int]:
    """Copy every record, keeping ids and timestamps. Returns (enrollments, submissions) copied."""
    copied_enrollments = sum(1 for record in source.list_enrollments() if target.import_enrollment(record))
    copied_submissions = sum(
        1 for record in source.list_contact_submissions() if target.import_contact_submission(record)
    )
    return copied_enrollments, copied_submissions


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data-dir", default=settings.data_dir, help="directory holding the JSON documents")
    parser.add_argument("--database-url", default=settings.database_url, help="target SQLAlchemy URL")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    data_dir = Path(args.data_dir)
    if not data_dir.is_dir():
        raise SystemExit(f"Directory not found: {data_dir}")

    target = SQLRecordStore(args.database_url)
    try:
        enrollments, submissions = migrate(JsonRecordStore(data_dir), target)
    finally:
        target.close()
    logger.info("Migrated %d enrollments and %d contact submissions", enrollments, submissions)


if __name__ == "__main__":
    main()
