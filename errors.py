class BasicError(Exception):
    """Base class for every error the interpreter reports to the user."""
    category = "ERROR"

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"


class BasicSyntaxError(BasicError):
    category = "SYNTAX"

class SemanticError(BasicError):
    category = "SEMANTIC"

class ResourceError(BasicError):
    category = "RESOURCE"

class BasicRuntimeError(BasicError):
    category = "RUNTIME"

class BasicIOError(BasicError):
    category = "I/O"


class ExecutionFinished(Exception): pass
