from .basic_io import BasicIO
from dom.builtin_function import BuiltinFunction
from dom.environment import Environment
from dom.values import UNIT, to_display
from typing import List, Any


def populate_io_environment(basic_io: BasicIO) -> Environment:
        io_env = Environment()

        def std_print(args: List[Any]) -> Any:
            basic_io.write_line(''.join(to_display(a) for a in args))
            return UNIT

        def std_input(args: List[Any]) -> Any:
            return basic_io.read_line()

        io_env.values['print'] = BuiltinFunction('print', None, std_print)
        io_env.values['input'] = BuiltinFunction('input', 0, std_input)

        return io_env
