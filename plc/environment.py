from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from plc.errors import (
    ArityError, ConstantReassignmentError, RedefinitionError, UnboundNameError,
)


@dataclass
class Variable:
    """A named binding. Only non-constant bindings may be re-assigned."""
    name: str
    is_constant: bool
    value: Any


class Environment:
    """A scope mapping names to variables and (name, arity) pairs to functions.

    Lookups that miss in this scope continue in the parent scope.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.variables: Dict[str, Variable] = {}
        self.functions: Dict[Tuple[str, int], Any] = {}

    def define_variable(self, name: str, is_constant: bool, value: Any) -> Variable:
        if name in self.variables:
            raise RedefinitionError(f'variable {name} already defined in this scope')
        variable = Variable(name, is_constant, value)
        self.variables[name] = variable
        return variable

    def lookup_variable(self, name: str) -> Variable:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                return env.variables[name]
            env = env.parent
        raise UnboundNameError(f'undefined variable {name}')

    def assign_variable(self, name: str, value: Any) -> None:
        variable = self.lookup_variable(name)
        if variable.is_constant:
            raise ConstantReassignmentError(f'cannot assign to constant {name}')
        variable.value = value

    def define_function(self, name: str, arity: int, function: Any) -> None:
        key = (name, arity)
        if key in self.functions:
            raise RedefinitionError(f'function {name}/{arity} already defined in this scope')
        self.functions[key] = function

    def lookup_function(self, name: str, arity: int) -> Any:
        key = (name, arity)
        env: Optional[Environment] = self
        while env is not None:
            if key in env.functions:
                return env.functions[key]
            env = env.parent
        arities = self.function_arities(name)
        if arities:
            expected = ', '.join(str(a) for a in arities)
            raise ArityError(f'{name} expects {expected} arguments, got {arity}')
        raise UnboundNameError(f'undefined function {name}')

    def function_arities(self, name: str) -> List[int]:
        """All arities `name` is defined with in this scope or its ancestors."""
        arities = set()
        env: Optional[Environment] = self
        while env is not None:
            arities.update(a for (n, a) in env.functions if n == name)
            env = env.parent
        return sorted(arities)
