import logging
import os

from errors import BasicIOError, BasicSyntaxError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = 'IBCONFIG'
# Undecodable bytes in program or settings files become U+FFFD
ENCODING = 'utf-8'


class Settings:
    def __init__(self, max_lines=500, max_line_len=127, stack_size=64,
                 lprint_file="lprint.out", disks=None):
        self.max_lines = max_lines
        self.max_line_len = max_line_len
        self.stack_size = stack_size
        self.lprint_file = lprint_file
        self.disks = disks if disks is not None else {} # D0 -> path, D1 -> path

    @property
    def kbytes_free(self):
        # Each stored line holds its text plus a 4-byte line number
        return self.max_lines * (self.max_line_len + 4) // 1024

    def __repr__(self):
        return (f"Settings(max_lines={self.max_lines}, max_line_len={self.max_line_len}, "
                f"stack_size={self.stack_size}, lprint_file={self.lprint_file!r}, disks={self.disks!r})")


INTEGER_KEYS = {
    'MAXLINES': 'max_lines',
    'LINELEN': 'max_line_len',
    'STACKSIZE': 'stack_size',
}
# A stored line keeps LINELEN - 1 characters, so LINELEN=1 would blank every line
MINIMUMS = {
    'MAXLINES': 1,
    'LINELEN': 2,
    'STACKSIZE': 1,
}
DISK_KEYS = {f"D{n}" for n in range(10)}


def load_settings(path=DEFAULT_SETTINGS_FILE):
    """
    Reads KEY=VALUE settings. Blank lines and '#' comments are skipped.
    A missing file gives the defaults.
    """
    settings = Settings()
    if not path or not os.path.exists(path):
        return settings

    try:
        with open(path, 'r', encoding=ENCODING, errors='replace') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'): continue
                if '=' not in line:
                    logger.warning("Ignoring malformed setting: %s", line)
                    continue
                key, val = line.split('=', 1)
                key = key.strip().upper()
                val = val.strip()

                if key in INTEGER_KEYS:
                    try:
                        number = int(val)
                    except ValueError:
                        logger.warning("Setting %s needs an integer, got %r", key, val)
                        continue
                    if number < MINIMUMS[key]:
                        logger.warning("Setting %s must be at least %d, got %d",
                                       key, MINIMUMS[key], number)
                        continue
                    setattr(settings, INTEGER_KEYS[key], number)
                elif key == 'LPRINT':
                    settings.lprint_file = val
                elif key in DISK_KEYS:
                    settings.disks[key] = val
                else:
                    logger.warning("Unknown setting %s", key)
    except OSError as e:
        logger.warning("Error loading %s: %s", path, e)
    return settings


class FileManager:
    def __init__(self, settings=None):
        self.settings = settings or Settings()

    def find_program(self, filename):
        """Resolves filename as given, then on each configured disk in order."""
        if os.path.exists(filename):
            return filename
        for key in sorted(self.settings.disks):
            path = os.path.join(self.settings.disks[key], filename)
            if os.path.exists(path):
                return path
        return None

    def save_program(self, filename, listing):
        filename = filename.strip()
        if not filename:
            raise BasicSyntaxError("FILENAME REQUIRED")
        logger.debug("Saving program to '%s'", filename)
        try:
            with open(filename, 'w', encoding=ENCODING) as f:
                for record in listing:
                    f.write(f"{record}\n")
        except OSError as e:
            logger.debug("Save failed: %s", e)
            raise BasicIOError("CANNOT OPEN FILE")

    def read_program(self, filename):
        """Returns the non-blank records of a saved program."""
        filename = filename.strip()
        if not filename:
            raise BasicSyntaxError("FILENAME REQUIRED")
        resolved_path = self.find_program(filename)
        if not resolved_path:
            raise BasicIOError("FILE NOT FOUND")
        logger.debug("Loading program from '%s'", resolved_path)
        try:
            with open(resolved_path, 'r', encoding=ENCODING, errors='replace') as f:
                return [line.rstrip('\r\n') for line in f if line.strip()]
        except OSError as e:
            logger.debug("Load failed: %s", e)
            raise BasicIOError("FILE NOT FOUND")

    def lprint(self, value):
        try:
            with open(self.settings.lprint_file, 'a', encoding=ENCODING) as f:
                f.write(f"{value}\n")
        except OSError as e:
            logger.debug("LPRINT failed: %s", e)
            raise BasicIOError("COULD NOT OPEN LPRINT.OUT FILE")
