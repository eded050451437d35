"""
Program - the single program type every workflow is expressed in.

A Program[T] is one of:
- Done(value): finished with a value of type T
- Suspend(instruction, continuations): waiting on one catalog instruction;
  its result is fed through the continuation chain to obtain the next Program
- Failed(error): finished with an error; nothing further runs

Programs are plain data. Building one runs nothing. An interpreter (see
shipwright.interpreter) walks a program with an explicit loop: execute the
instruction of a Suspend, call resume() with the result, repeat until Done or
Failed.

Composition:
    program.bind(f)    sequencing; f receives the result and returns a Program
    program.map(f)     transform the result
    program.then(p)    sequence, ignoring the result

Laws (observable under interpretation):
    Program.unit(v).bind(f)            == f(v)
    p.bind(Program.unit)               == p
    p.bind(f).bind(g)                  == p.bind(lambda x: f(x).bind(g))
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, TypeVar

from shipwright.instructions import Instruction

A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")

Continuation = Callable[[Any], "Program[Any]"]


class Program(Generic[T]):
    """Base class for the three program shapes."""

    def bind(self, f: Callable[[T], "Program[B]"]) -> "Program[B]":
        raise NotImplementedError

    def map(self, f: Callable[[T], B]) -> "Program[B]":
        return self.bind(lambda value: Done(f(value)))

    def then(self, next_program: "Program[B]") -> "Program[B]":
        return self.bind(lambda _: next_program)

    @property
    def is_done(self) -> bool:
        return isinstance(self, Done)

    @property
    def is_failed(self) -> bool:
        return isinstance(self, Failed)

    @staticmethod
    def unit(value: A) -> "Program[A]":
        """Wrap a plain value as a finished program."""
        return Done(value)

    @staticmethod
    def lift(instruction: Instruction) -> "Program[Any]":
        """A program consisting of exactly one instruction."""
        return Suspend(instruction)

    @staticmethod
    def failed(error: BaseException) -> "Program[Any]":
        return Failed(error)


@dataclass(frozen=True)
class Done(Program[T]):
    value: T

    def bind(self, f):
        return f(self.value)


@dataclass(frozen=True)
class Suspend(Program[T]):
    """
    An instruction awaiting execution, plus what to do with its result.

    Continuations are kept as a flat tuple rather than nested closures so
    that long bind chains resume iteratively.
    """
    instruction: Instruction
    continuations: tuple[Continuation, ...] = ()

    def bind(self, f):
        return Suspend(self.instruction, self.continuations + (f,))

    def resume(self, value: Any) -> Program[Any]:
        """
        Feed the instruction result through the continuation chain.

        Args:
            value: The result produced for self.instruction

        Returns:
            The next program to interpret
        """
        program: Program[Any] = Done(value)
        for i, f in enumerate(self.continuations):
            if isinstance(program, Done):
                program = f(program.value)
            elif isinstance(program, Suspend):
                rest = self.continuations[i:]
                return Suspend(program.instruction, program.continuations + rest)
            else:
                return program
        return program


@dataclass(frozen=True)
class Failed(Program[T]):
    error: BaseException

    def bind(self, f):
        return self


def sequence(programs: Iterable[Program[A]]) -> Program[list[A]]:
    """Run programs in order, collecting their results."""
    return traverse(list(programs), lambda p: p)


def traverse(items: Iterable[A], f: Callable[[A], Program[B]]) -> Program[list[B]]:
    """
    Apply `f` to every item and run the resulting programs in order.

    Stops at the first failure. The program is built lazily, one item at a
    time, so the chain depth stays constant however many items there are.
    """
    values = list(items)

    def collected(acc) -> list[B]:
        out: list[B] = []
        while acc is not None:
            value, acc = acc
            out.append(value)
        out.reverse()
        return out

    # acc is a (value, rest) chain so each step shares its prefix
    def step(index: int, acc) -> Program[list[B]]:
        while index < len(values):
            program = f(values[index])
            if not isinstance(program, Done):
                return program.bind(
                    lambda result, i=index, rest=acc: step(i + 1, (result, rest))
                )
            acc = (program.value, acc)
            index += 1
        return Done(collected(acc))

    return step(0, None)
