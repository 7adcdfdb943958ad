"""
These most-fundamental classes are separate from the rest
to avoid various circular-import scenarios.
The environment forces promises and the evaluator calls functions,
but neither needs to know the concrete classes; only these interfaces.
"""
from abc import ABC, abstractmethod
from typing import Optional, Sequence


class Expression(ABC):
	""" Code as data. Concrete kinds live in the syntax module. """
	__slots__ = ()

	def __str__(self):
		from .deparse import deparse
		return deparse(self)


class RuntimeValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	__slots__ = ()


class Deferred(RuntimeValue):
	""" A kind of not-yet-value which can be forced. """
	__slots__ = ()

	@abstractmethod
	def force(self): pass

	@abstractmethod
	def expression(self) -> Expression: pass


ARGS = Sequence[tuple[Optional[str], Deferred]]


class Function(RuntimeValue):
	""" A run-time object that can be applied with arguments. """
	__slots__ = ()

	@abstractmethod
	def apply(self, args: ARGS, caller: "Environment"):
		"""
		The arguments arrive in call-site order as (name, promise) pairs.
		Nothing has been forced yet; that is up to the function.
		"""
		pass

# Records are dicts; one carrying a class vector keeps it under this key.
CLASS_KEY = ""
