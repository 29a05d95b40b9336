import logging
import sys
from argparse import ArgumentParser

from errors import BasicError
from file_manager import DEFAULT_SETTINGS_FILE, load_settings
from interpreter import DIALECT, VERSION, IntegerBasicInterpreter


class ConsoleIOHandler:
    def write(self, text):
        print(text, end="", flush=True)

    def input(self, prompt=""):
        return input(prompt)

    def shutdown(self):
        sys.exit(0)


class BasicCLI:
    def __init__(self, io_handler, settings=None):
        self.interpreter = IntegerBasicInterpreter(io_handler=io_handler, settings=settings)
        self.io_handler = io_handler
        self.settings = self.interpreter.settings

    def print(self, text):
        self.io_handler.write(text + "\n")

    def input(self, prompt):
        return self.io_handler.input(prompt)

    def banner(self):
        self.print(f"BASIC++ ({DIALECT}) v{VERSION}")
        self.print(f"{self.settings.kbytes_free} kbytes Free")
        self.print("READY")

    def run_file(self, filename):
        try:
            self.interpreter.load_file(filename)
        except BasicError as e:
            self.interpreter.report_error(e)
            return
        self.interpreter.execute()

    def handle_line(self, user_input):
        """Stores a numbered line, or executes anything else immediately."""
        user_input = user_input.rstrip('\r\n')
        stripped = user_input.lstrip(' \t')

        if stripped[:1].isdigit():
            self.interpreter.store_line(user_input)
        elif stripped.strip():
            self.interpreter.execute_direct(user_input)
            self.print("OK")
            self.print("READY")
        else:
            self.print("READY")

    def run_repl(self, program=None):
        self.banner()

        if program:
            self.run_file(program)

        while True:
            try:
                user_input = self.input("> ")
            except EOFError:
                self.print("")
                break
            except KeyboardInterrupt:
                self.print("")
                break

            try:
                self.handle_line(user_input)
            except KeyboardInterrupt:
                self.print("BREAK")
                self.print("READY")


def make_arg_parser():
    parser = ArgumentParser(
        prog='basic',
        description='BASIC++ integer BASIC interpreter.',
        )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='log interpreter state while running',
        )
    parser.add_argument(
        '--config',
        default=DEFAULT_SETTINGS_FILE,
        help='settings file (default: %(default)s)',
        )
    parser.add_argument(
        'program',
        nargs='?',
        help='program to LOAD and RUN before the prompt',
        )
    return parser


def main(argv=None):
    args = make_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="[%(levelname)s] %(message)s",
        )
    if args.debug:
        logging.getLogger(__name__).debug("Debug mode enabled.")

    settings = load_settings(args.config)
    cli = BasicCLI(ConsoleIOHandler(), settings=settings)
    cli.run_repl(program=args.program)
    return 0


if __name__ == "__main__":
    sys.exit(main())
