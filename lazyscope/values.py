"""
This module defines the specialized value-types that the evaluator operates in terms of.
Basic primitive values play themselves, but special things like closures need more help.
"""
from typing import Any, Callable, NamedTuple, Optional, Sequence
from . import syntax
from .ontology import Expression, Function, ARGS
from .environment import Environment, MISSING
from .evaluator import Promise, Dots, force, evaluate
from .diagnostics import UnusedArgumentError, ConditionError

# When set to a Report, every closure call gets announced at verbosity two.
CALL_TRACE = None

class Formal(NamedTuple):
	name: str
	default: Optional[Expression] = None

class Closure(Function):
	""" The run-time manifestation of a function: a callable value tied to its natal environment. """

	def __init__(self, formals:Sequence[Formal], body:Expression, enclosing:Environment):
		assert isinstance(body, Expression), type(body)
		assert isinstance(enclosing, Environment), type(enclosing)
		self._formals = tuple(Formal(*f) if isinstance(f, tuple) else Formal(f) for f in formals)
		self._body = body
		self._enclosing = enclosing

	@property
	def formals(self) -> tuple[Formal, ...]: return self._formals
	@property
	def body(self) -> Expression: return self._body
	@property
	def enclosing(self) -> Environment: return self._enclosing

	def __str__(self):
		from .deparse import deparse
		return deparse(self.as_form())

	def as_form(self) -> syntax.Call:
		""" The ``function(...)`` call that would rebuild this closure. """
		params = [f.name if f.default is None else (f.name, f.default) for f in self._formals]
		return syntax.lambda_form(params, self._body)

	def apply(self, args: ARGS, caller:Environment) -> Any:
		frame = Environment.create(self._enclosing)
		frame.dynamic_link = caller
		frame.function = self
		frame.arguments = tuple(args)
		matched = match_arguments(self._formals, args)
		frame.missing = frozenset(f.name for f in self._formals if f.name not in matched)
		for formal in self._formals:
			if formal.name in matched:
				frame.bind_local(formal.name, matched[formal.name])
			elif formal.name == syntax.DOTS:
				frame.bind_local(formal.name, Dots())
			elif formal.default is None:
				frame.bind_local(formal.name, MISSING)
			else:
				# Defaults are lazy too, and they see the callee's own frame.
				frame.bind_local(formal.name, Promise(formal.default, frame))
		if CALL_TRACE is not None:
			CALL_TRACE.info("  "*frame.call_depth() + "-> " + _describe_call(self, args), level=2)
		return force(evaluate(self._body, frame))

	def __call__(self, *args, **kwargs):
		pairs = [(None, _python_argument(a)) for a in args]
		pairs.extend((k, _python_argument(v)) for k, v in kwargs.items())
		return self.apply(pairs, self._enclosing)

def _python_argument(value):
	return Promise.forced_to(syntax.Literal(value), value)

def _describe_call(closure:Closure, args:ARGS):
	from .deparse import deparse
	parts = []
	for name, promise in args:
		text = deparse(promise.expression())
		parts.append(text if name is None else "%s = %s" % (name, text))
	return "function(%s)(%s)" % (", ".join(f.name for f in closure.formals), ", ".join(parts))

def match_arguments(formals:Sequence[Formal], args:ARGS) -> dict[str, Any]:
	"""
	R's order of business: exact names first, then positions.
	Anything left over goes to ``...`` if there is one.
	Formals after ``...`` can only be matched by name.
	"""
	names = [f.name for f in formals]
	has_dots = syntax.DOTS in names
	positional_names = names[:names.index(syntax.DOTS)] if has_dots else names
	matched, dots, leftover = {}, [], []
	for index, (name, promise) in enumerate(args):
		if name is not None and name != syntax.DOTS and name in names:
			if name in matched: raise UnusedArgumentError("%s = %s" % (name, promise.expression()))
			matched[name] = promise
		elif name is not None:
			if not has_dots: raise UnusedArgumentError("%s = %s" % (name, promise.expression()))
			dots.append((index, name, promise))
		else:
			leftover.append((index, promise))
	vacancies = iter([n for n in positional_names if n not in matched])
	for index, promise in leftover:
		slot = next(vacancies, None)
		if slot is not None: matched[slot] = promise
		elif has_dots: dots.append((index, None, promise))
		else: raise UnusedArgumentError(promise.expression())
	if has_dots:
		# Keep call-site order among the collected arguments.
		dots.sort(key=lambda triple: triple[0])
		matched[syntax.DOTS] = Dots((name, promise) for _, name, promise in dots)
	return matched

class Primitive(Function):
	"""
	All parameters to primitive procedures are strict: they get forced in call-site order.
	Some primitives also want to know the environment they were called from.
	"""
	def __init__(self, fn:Callable, name:str="", *, with_env=False):
		self._fn = fn
		self._name = name or fn.__name__
		self._with_env = with_env

	def __str__(self): return '.Primitive("%s")' % self._name

	def apply(self, args: ARGS, caller:Environment) -> Any:
		positional, named = [], {}
		for name, promise in args:
			value = force(promise)
			if name is None: positional.append(value)
			else: named[name.replace(".", "_")] = value
		if self._with_env: positional.insert(0, caller)
		try: return self._fn(*positional, **named)
		except (TypeError, ValueError, AttributeError, ArithmeticError) as ex:
			raise ConditionError("invalid arguments to %s(): %s" % (self._name, ex)) from ex

class Special(Function):
	""" Gets the promises raw, along with the calling environment; decides for itself what to force. """
	def __init__(self, fn:Callable[[Environment, ARGS], Any], name:str=""):
		self._fn = fn
		self._name = name or fn.__name__

	def __str__(self): return '.Primitive("%s")' % self._name

	def apply(self, args: ARGS, caller:Environment) -> Any:
		return self._fn(caller, args)
