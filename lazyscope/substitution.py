"""
Substitution: rewrite a piece of code using what one frame knows about its names.

Only the immediate frame counts; ancestors are never consulted.
A promise contributes the code it was made from, not its value,
which is how an argument's original expression travels back out to the caller.
At top level nothing is local, so substitute there is just quote.
"""
from typing import Any, Mapping, Union
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Deferred, Expression
from .environment import Environment, MISSING
from .evaluator import Dots

ABSENT = object()

class Substitutor(Visitor):
	def __init__(self, frame:Union[Environment, Mapping[str, Any]]):
		self._frame = frame

	def _binding(self, name:str):
		if isinstance(self._frame, Environment):
			return self._frame.fetch(name) if self._frame.holds(name) else ABSENT
		return self._frame.get(name, ABSENT)

	def visit_Literal(self, expr:syntax.Literal):
		return expr

	def visit_Symbol(self, expr:syntax.Symbol):
		"""
		A promise gives back its code. A binding that already holds code is spliced
		in as code, the way R treats language objects, rather than wrapped as a literal.
		"""
		binding = self._binding(expr.name)
		if binding is ABSENT or binding is MISSING or isinstance(binding, Dots): return expr
		if isinstance(binding, Deferred): return binding.expression()
		if isinstance(binding, Expression): return binding
		return syntax.Literal(binding)

	def visit_Call(self, expr:syntax.Call):
		op = expr.op if isinstance(expr.op, str) else self.visit(expr.op)
		args, names = [], []
		for name, arg in expr.pairs():
			if name is None and arg == _DOTS_SYMBOL:
				dots = self._binding(syntax.DOTS)
				if isinstance(dots, Dots):
					for dot_name, promise in dots:
						names.append(dot_name)
						args.append(promise.expression())
					continue
			names.append(name)
			args.append(self.visit(arg))
		return syntax.Call(op, args, names)

_DOTS_SYMBOL = syntax.Symbol(syntax.DOTS)

def substitute(expr:Expression, env:Union[Environment, Mapping[str, Any]]) -> Expression:
	if isinstance(env, Environment) and env.is_top_level: return expr
	return Substitutor(env).visit(expr)
