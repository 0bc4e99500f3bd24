from dom.builtin_function import BuiltinFunction
from dom.environment import Environment
from dom.errors import ErrorKind, EvalError
from dom.values import kind_of
from typing import List, Any


def populate_str_environment() -> Environment:
        str_env = Environment()

        def std_len(args: List[Any]) -> Any:
            value = args[0]
            if not isinstance(value, str):
                raise EvalError(ErrorKind.TYPE_MISMATCH, f'str.len expects a Str, got {kind_of(value)}')
            return len(value)

        str_env.values['len'] = BuiltinFunction('len', 1, std_len)

        return str_env
