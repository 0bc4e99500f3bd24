from dom.builtin_function import BuiltinFunction
from dom.environment import Environment
from dom.errors import ErrorKind, EvalError
from dom.values import ListValue, is_int, kind_of
from typing import List, Any


def _expect_list(name: str, value: Any) -> ListValue:
    if not isinstance(value, ListValue):
        raise EvalError(ErrorKind.TYPE_MISMATCH, f'{name} expects a List, got {kind_of(value)}')
    return value


def _expect_index(name: str, items: ListValue, index: Any) -> int:
    if not is_int(index):
        raise EvalError(ErrorKind.TYPE_MISMATCH, f'{name} index must be Int, got {kind_of(index)}')
    if index < 0 or index >= len(items):
        raise EvalError(ErrorKind.INDEX_OUT_OF_BOUNDS,
                        f'{name} index {index} out of bounds for list of length {len(items)}')
    return index


def populate_list_environment() -> Environment:
        list_env = Environment()

        def std_get(args: List[Any]) -> Any:
            items = _expect_list('get', args[0])
            return items.get(_expect_index('get', items, args[1]))

        def std_set(args: List[Any]) -> Any:
            items = _expect_list('set', args[0])
            return items.replace(_expect_index('set', items, args[1]), args[2])

        def std_push(args: List[Any]) -> Any:
            items = _expect_list('push', args[0])
            return items.append(args[1])

        def std_pop(args: List[Any]) -> Any:
            items = _expect_list('pop', args[0])
            return items.remove(_expect_index('pop', items, args[1]))

        def std_len(args: List[Any]) -> Any:
            return len(_expect_list('len', args[0]))

        list_env.values['get'] = BuiltinFunction('get', 2, std_get)
        list_env.values['set'] = BuiltinFunction('set', 3, std_set)
        list_env.values['push'] = BuiltinFunction('push', 2, std_push)
        list_env.values['pop'] = BuiltinFunction('pop', 2, std_pop)
        list_env.values['len'] = BuiltinFunction('len', 1, std_len)

        return list_env
