import logging
import operator
import re
import sys

from cursor import Cursor
from errors import (BasicError, BasicRuntimeError, BasicSyntaxError,
                    ExecutionFinished, ResourceError, SemanticError)
from expression import ExpressionEvaluator
from file_manager import FileManager, Settings
from program_store import ProgramStore
from values import LETTERS, VariableStore

logger = logging.getLogger(__name__)

DIALECT = "core"
VERSION = "5.0"

# Commands that would reset the interpreter out from under a running program
DIRECT_ONLY = ('RUN', 'LIST', 'NEW', 'SAVE', 'LOAD')
STUBS = ('SYSTEM', '$IMPORT', '$INCLUDE', '$MERGE')

COMPARISONS = {
    '=': operator.eq,
    '<>': operator.ne,
    '<': operator.lt,
    '>': operator.gt,
}

INPUT_PATTERN = re.compile(r'\s*([+\-]?\d+)')


class CallStack:
    """GOSUB return indices, bounded by capacity."""

    def __init__(self, capacity=64):
        self.capacity = capacity
        self.frames = []

    def __len__(self): return len(self.frames)

    def is_full(self):
        return len(self.frames) >= self.capacity

    def push(self, index):
        if self.is_full():
            raise ResourceError("GOSUB STACK OVERFLOW")
        self.frames.append(index)

    def pop(self):
        if not self.frames:
            raise ResourceError("RETURN WITHOUT GOSUB")
        return self.frames.pop()

    def clear(self):
        self.frames = []


class IntegerBasicInterpreter:
    def __init__(self, io_handler=None, settings=None):
        self.io_handler = io_handler # Can be None for stdout/stdin fallback
        self.settings = settings or Settings()
        self.file_manager = FileManager(self.settings)

        self.program = ProgramStore(capacity=self.settings.max_lines,
                                    max_line_len=self.settings.max_line_len)
        self.variables = VariableStore()
        self.stack = CallStack(self.settings.stack_size)
        self.evaluator = ExpressionEvaluator(self.variables)

        # Run state
        self.running = False
        self.in_program = False # True while execute() drives stored lines
        self.program_counter = 0
        self.jumped = False     # Counter redirected by the current statement

    # --- I/O ---

    def _write(self, text):
        if self.io_handler:
            self.io_handler.write(text)
        else:
            print(text, end="", flush=True)

    def _print(self, text):
        self._write(f"{text}\n")

    def _input(self, prompt):
        if self.io_handler:
            return self.io_handler.input(prompt)
        return input(prompt)

    def _shutdown(self):
        if self.io_handler and hasattr(self.io_handler, 'shutdown'):
            self.io_handler.shutdown()
        else:
            sys.exit(0)

    def report_error(self, error, line_number=None):
        """Rings the bell, prints the message and halts whatever is running."""
        message = f"ERROR: {error.message}"
        if line_number is not None:
            message += f" IN {line_number}"
        self._write("\a")
        self._print(message)
        if self.running:
            logger.debug("Halting program due to %s error.", error.category)
        self.running = False

    # --- Program editing ---

    def reset_state(self):
        """Clears the program, variables and GOSUB stack (NEW)."""
        logger.debug("Clearing all memory (NEW).")
        self.program.clear()
        self.variables.clear()
        self.stack.clear()
        self.program_counter = 0

    def store_line(self, line):
        try:
            self.program.store_line(line)
        except BasicError as e:
            self.report_error(e)

    def load_program(self, source_code):
        """Replaces the program with the numbered lines in source_code."""
        # Only newline separates records; \f or \u2028 may sit inside a PRINT string
        self.load_records(line.rstrip('\r') for line in source_code.split('\n'))

    def load_records(self, records):
        self.reset_state()
        for line in records:
            if not line.strip():
                continue
            self.store_line(line)

    def list_program(self):
        for record in self.program.listing():
            self._print(record)

    def save_file(self, filename):
        self.file_manager.save_program(filename, self.program.listing())

    def load_file(self, filename):
        records = self.file_manager.read_program(filename)
        # Only a readable file replaces the current program
        self.load_records(records)

    # --- Execution ---

    def execute_direct(self, code):
        """Runs one statement typed at the prompt."""
        self.running = True
        self.in_program = False
        try:
            self._dispatch_statement(Cursor(code))
        except BasicError as e:
            self.report_error(e)
        except ExecutionFinished:
            pass
        finally:
            self.running = False

    def execute(self):
        """Runs the stored program from its first line (RUN)."""
        logger.debug("--- RUNNING PROGRAM ---")
        self.running = True
        self.in_program = True
        self.program_counter = 0
        self.stack.clear()
        self.variables.clear()

        try:
            while self.running and self.program_counter < len(self.program):
                line = self.program[self.program_counter]
                logger.debug("Running line %d: %s", line.number, line.text)
                self.jumped = False

                try:
                    self._dispatch_statement(Cursor(line.text))
                except BasicError as e:
                    self.report_error(e, line.number)
                except ExecutionFinished:
                    self.running = False
                except KeyboardInterrupt:
                    self._print(f"BREAK IN {line.number}")
                    self.running = False

                if self.running and not self.jumped:
                    self.program_counter += 1
        finally:
            logger.debug("--- PROGRAM ENDED ---")
            self.running = False
            self.in_program = False

    # --- Control flow ---

    def goto(self, line_number):
        logger.debug("GOTO: Jumping to line %d", line_number)
        index = self.program.find(line_number)
        if index is None:
            raise BasicRuntimeError("LINE NOT FOUND")
        self.program_counter = index
        self.jumped = True

    def gosub(self, line_number):
        logger.debug("GOSUB: Pushing return index %d to stack slot %d",
                     self.program_counter + 1, len(self.stack))
        self.stack.push(self.program_counter + 1)
        self.goto(line_number)

    def return_from_gosub(self):
        self.program_counter = self.stack.pop()
        self.jumped = True
        logger.debug("RETURN: Popped index %d from stack.", self.program_counter)

    # --- Statements ---

    def _read_variable(self, cursor, command):
        cursor.skip_whitespace()
        name = cursor.peek()
        if not name.isalpha():
            raise BasicSyntaxError(f"EXPECTED VARIABLE FOR {command}")
        cursor.advance()
        name = name.upper()
        if name not in LETTERS:
            raise SemanticError("INVALID VARIABLE")
        return name

    def _parse_condition(self, cursor):
        left = self.evaluator.evaluate(cursor)

        cursor.skip_whitespace()
        ch = cursor.peek()
        if ch == '=':
            op = '='
            cursor.advance()
        elif ch == '<':
            cursor.advance()
            if cursor.peek() == '>':
                op = '<>'
                cursor.advance()
            else:
                op = '<'
        elif ch == '>':
            op = '>'
            cursor.advance()
        else:
            raise BasicSyntaxError("EXPECTED OPERATOR IN IF")

        right = self.evaluator.evaluate(cursor)
        condition = COMPARISONS[op](left, right)
        logger.debug("IF: val1=%d, op='%s', val2=%d. Condition is %s",
                     left, op, right, "TRUE" if condition else "FALSE")
        return condition

    def _dispatch_statement(self, cursor):
        if not self.running:
            return

        cmd = cursor.read_word()
        cursor.skip_whitespace()
        logger.debug("Executing command: '%s', Args: '%s'", cmd, cursor.rest())

        if not cmd:
            # Empty line (or just a line number)
            return

        if cmd in DIRECT_ONLY and self.in_program:
            raise BasicRuntimeError(f"CAN'T USE {cmd} IN A PROGRAM")

        if cmd == 'PRINT':
            if cursor.peek() == '"':
                cursor.advance()
                end = cursor.text.find('"', cursor.pos)
                if end == -1:
                    raise BasicSyntaxError("UNTERMINATED STRING")
                self._print(cursor.text[cursor.pos:end])
                cursor.pos = end + 1
            elif cursor.at_end():
                self._print("0")
            else:
                self._print(str(self.evaluator.evaluate(cursor)))

        elif cmd == 'LPRINT':
            value = 0 if cursor.at_end() else self.evaluator.evaluate(cursor)
            self.file_manager.lprint(value)

        elif cmd == 'LET':
            name = self._read_variable(cursor, 'LET')
            cursor.skip_whitespace()
            if cursor.peek() != '=':
                raise BasicSyntaxError("EXPECTED '=' IN LET")
            cursor.advance()
            self.variables[name] = self.evaluator.evaluate(cursor)

        elif cmd == 'INPUT':
            name = self._read_variable(cursor, 'INPUT')
            try:
                reply = self._input("? ")
            except EOFError:
                # End of input halts the run, it is not an error
                raise ExecutionFinished()
            match = INPUT_PATTERN.match(reply or "")
            self.variables[name] = int(match.group(1)) if match else 0

        elif cmd == 'GOTO':
            self.goto(cursor.read_integer())

        elif cmd == 'GOSUB':
            # Overflow is reported before the target is parsed
            if self.stack.is_full():
                raise ResourceError("GOSUB STACK OVERFLOW")
            self.gosub(cursor.read_integer())

        elif cmd == 'RETURN':
            self.return_from_gosub()

        elif cmd == 'IF':
            condition = self._parse_condition(cursor)
            cursor.skip_whitespace()
            if not cursor.match_keyword('THEN'):
                raise BasicSyntaxError("EXPECTED 'THEN' IN IF")
            cursor.skip_whitespace()

            if condition:
                logger.debug("IF (TRUE): Executing remainder of line: '%s'", cursor.rest())
                if cursor.peek().isdigit():
                    self.goto(cursor.read_integer())
                else:
                    self._dispatch_statement(cursor)

        elif cmd == 'REM':
            pass

        elif cmd in ('END', 'STOP'):
            self.running = False

        elif cmd == 'BEEP':
            self._write("\a")

        elif cmd == 'RUN':
            self.execute()

        elif cmd == 'LIST':
            self.list_program()

        elif cmd == 'NEW':
            self.reset_state()

        elif cmd == 'SAVE':
            self.save_file(cursor.rest())

        elif cmd == 'LOAD':
            self.load_file(cursor.rest())

        elif cmd in STUBS:
            self._print(f"FRAMEWORK: Command {cmd} is not implemented.")

        elif cmd in ('QUIT', 'EXIT'):
            self.running = False
            self._shutdown()

        else:
            raise BasicSyntaxError("UNKNOWN COMMAND")
