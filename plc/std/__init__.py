from typing import Any, List

from plc.builtin_function import BuiltinFunction
from plc.environment import Environment
from plc.types import NIL, to_string


def populate_standard_environment() -> Environment:
    """Build the root scope holding the builtin functions."""
    std_env = Environment()

    def std_print(args: List[Any]) -> Any:
        print(to_string(args[0]))
        return NIL

    std_env.define_function('print', 1, BuiltinFunction('print', 1, std_print))
    return std_env
