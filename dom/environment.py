from typing import Any, Dict, Optional
from dom.errors import ErrorKind, EvalError, Span


class Environment:
    """Represents a scope mapping names to values, chained to its enclosing scope.

    Scopes reference their parent, never their children, so the chain is
    acyclic. A closure keeps its defining scope alive simply by holding a
    reference to it; the scope is released with the last such reference.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def define(self, name: str, value: Any):
        # `let` always binds in this scope, shadowing any outer binding
        self.values[name] = value

    def resolve(self, name: str) -> Optional['Environment']:
        env = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def get(self, name: str, span: Optional[Span] = None) -> Any:
        env = self.resolve(name)
        if env is None:
            raise EvalError(ErrorKind.UNDEFINED_NAME, f'undefined name {name}', span)
        return env.values[name]

    def assign(self, name: str, value: Any, span: Optional[Span] = None):
        env = self.resolve(name)
        if env is None:
            raise EvalError(ErrorKind.UNDEFINED_NAME, f'cannot assign to undeclared name {name}', span)
        env.values[name] = value

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None
