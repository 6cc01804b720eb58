from dataclasses import dataclass
from typing import Any, Callable, List

from plc.types import CallableVal


@dataclass(eq=False, repr=False)
class BuiltinFunction(CallableVal):
    name: str
    arity: int
    fn: Callable[[List[Any]], Any]

    def invoke(self, args: List[Any]) -> Any:
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<builtin {self.name}/{self.arity}>"
