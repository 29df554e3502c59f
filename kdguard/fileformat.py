# format, write
# (saving generated passwords to a file)
#

import io
import logging
from datetime import datetime
from pathlib import Path

log = logging.getLogger(__name__)

HEADER_TITLE = 'Generated with kdguard'
DATE_FORMAT = '%d.%m.%Y %H:%M:%S'
FILENAME_DATE_FORMAT = '%d_%m_%Y'


def format_header(now: datetime) -> str:
    """Format header with generation date."""
    return (f"{HEADER_TITLE}\n"
            f"Date: {now.strftime(DATE_FORMAT)}\n"
            f"Generated passwords:\n")


def write_file(stream, passwords, now: datetime = None):
    """Write header and passwords (one per line) into text stream."""
    stream.write(format_header(now or datetime.now()))
    for password in passwords:
        stream.write(password + '\n')


def format_file(passwords, now: datetime = None) -> str:
    """Format whole file (header and passwords) into string."""
    stream = io.StringIO()
    write_file(stream, passwords, now)
    return stream.getvalue()


def default_filename(now: datetime = None) -> str:
    return f"passwords_{(now or datetime.now()).strftime(FILENAME_DATE_FORMAT)}.txt"


def save_passwords(passwords, path: Path, now: datetime = None) -> Path:
    """Write `passwords` to file at `path`, replacing its content."""
    path = Path(path).expanduser()
    log.info("Saving %d passwords to file: %s", len(passwords), path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        write_file(f, passwords, now)
    return path
